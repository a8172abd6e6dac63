"""
Raw data records.

Validates hero, title and event records as they appear in data files and
converts them to the engine's card models. Data files in the wild use
several spellings for the same field ("Name" / "name", "Required_Hero" /
"requirement", "Set_Scoring" / "points_array" / "pointsArray"), so every
field accepts its known aliases.

Malformed optional data is recovered with a warning: a missing cost map
costs nothing, a missing points table scores nothing, a nameless hero gets a
placeholder name.
"""

import logging
import re
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from kingdomsim.config import RESOURCES
from kingdomsim.models.cards import EventCard, Hero, Title
from kingdomsim.models.resources import ResourceBundle

logger = logging.getLogger(__name__)

UNKNOWN_HERO_NAME = "Unknown Hero"
DEFAULT_LEADING_RESOURCE = "military"


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("id", mode="before", check_fields=False)
    @classmethod
    def id_as_text(cls, value: Any) -> Any:
        return None if value is None else str(value)


class HeroRecord(_Record):
    """A hero as stored in heroes.json."""

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "Id", "ID"))
    name: str | None = Field(default=None, validation_alias=AliasChoices("name", "Name"))
    allegiance: str = Field(default="", validation_alias=AliasChoices("allegiance", "Allegiance"))
    role: str | None = Field(default=None, validation_alias=AliasChoices("role", "Role"))
    role2: str | None = Field(default=None, validation_alias=AliasChoices("role2", "Role2"))
    roles: list[str] = Field(default_factory=list, validation_alias=AliasChoices("roles", "Roles"))
    military: int = Field(default=0, validation_alias=AliasChoices("military", "Military"))
    influence: int = Field(default=0, validation_alias=AliasChoices("influence", "Influence"))
    supplies: int = Field(default=0, validation_alias=AliasChoices("supplies", "Supplies"))
    piety: int = Field(default=0, validation_alias=AliasChoices("piety", "Piety"))
    female: bool = Field(default=False, validation_alias=AliasChoices("female", "Female"))

    @field_validator("military", "influence", "supplies", "piety", mode="before")
    @classmethod
    def blank_stat_is_zero(cls, value: Any) -> Any:
        if value is None or value == "":
            return 0
        return value

    def to_model(self) -> Hero:
        name = (self.name or "").strip()
        if not name:
            logger.warning("Hero record %r has no name; using placeholder", self.id)
            name = UNKNOWN_HERO_NAME

        roles = [r for r in self.roles if r]
        role = self.role or (roles[0] if roles else "")
        role2 = self.role2 or (roles[1] if len(roles) > 1 else None)

        return Hero(
            id=self.id or _slug(name),
            name=name,
            allegiance=self.allegiance,
            role=role,
            role2=role2,
            military=self.military,
            influence=self.influence,
            supplies=self.supplies,
            piety=self.piety,
            female=self.female,
        )


class TitleRecord(_Record):
    """A title as stored in titles.json."""

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "Id", "ID"))
    name: str | None = Field(default=None, validation_alias=AliasChoices("name", "Name"))
    cost: dict[str, int] | None = Field(
        default=None, validation_alias=AliasChoices("cost", "total_cost", "Cost")
    )
    requirement: str = Field(
        default="", validation_alias=AliasChoices("requirement", "Required_Hero", "required_hero")
    )
    set_requirement: str = Field(
        default="",
        validation_alias=AliasChoices("set_requirement", "set_description", "Set_Requirement"),
    )
    points: list[int] | None = Field(
        default=None,
        validation_alias=AliasChoices("points", "points_array", "pointsArray", "Set_Scoring"),
    )
    is_legendary: bool = Field(
        default=False, validation_alias=AliasChoices("is_legendary", "legendary")
    )
    named_legends: list[str] = Field(default_factory=list)
    legend_bonus: int | None = None

    @field_validator("points", mode="before")
    @classmethod
    def split_points(cls, value: Any) -> Any:
        """Accept "0,2,5,9" and "0 2 5 9" as well as a list."""
        if isinstance(value, str):
            parts = [p for p in re.split(r"[,\s/]+", value) if p]
            return parts or None
        return value

    @field_validator("cost", mode="before")
    @classmethod
    def blank_cost_is_zero(cls, value: Any) -> Any:
        """Blank amounts cost nothing; anything else must be an integer."""
        if isinstance(value, dict):
            return {
                key: 0 if amount is None or amount == "" else amount
                for key, amount in value.items()
            }
        return value

    @field_validator("requirement", "set_requirement", mode="before")
    @classmethod
    def none_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def to_model(self) -> Title:
        name = (self.name or "").strip() or "Unknown Title"

        if self.cost is None:
            logger.warning("Title %s has no cost map; treating it as free", name)
            total_cost = ResourceBundle()
        else:
            cost = {str(key).lower(): value for key, value in self.cost.items()}
            unknown = sorted(set(cost) - set(RESOURCES))
            if unknown:
                logger.warning("Title %s cost has unknown resources %s", name, unknown)
            total_cost = ResourceBundle.from_mapping(cost)

        if not self.points:
            logger.warning("Title %s has no points table", name)

        return Title(
            id=self.id or _slug(name),
            name=name,
            total_cost=total_cost,
            requirement=self.requirement,
            set_requirement=self.set_requirement,
            points=tuple(self.points or ()),
            is_legendary=self.is_legendary or bool(self.named_legends),
            named_legends=tuple(self.named_legends),
            legend_bonus=self.legend_bonus,
        )


class EventRecord(_Record):
    """An event card as stored in events.json."""

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "Id", "ID"))
    name: str = Field(default="", validation_alias=AliasChoices("name", "Name"))
    leading_resource: str | None = Field(
        default=None,
        validation_alias=AliasChoices("leading_resource", "leadingResource", "Leading_resource"),
    )

    def to_model(self) -> EventCard:
        name = self.name.strip() or "Unknown Event"
        resource = (self.leading_resource or "").strip().lower()
        if resource not in RESOURCES:
            logger.warning(
                "Event %s has leading resource %r; using %s",
                name,
                self.leading_resource,
                DEFAULT_LEADING_RESOURCE,
            )
            resource = DEFAULT_LEADING_RESOURCE
        return EventCard(id=self.id or _slug(name), name=name, leading_resource=resource)
