"""
Requirement text parser.

Title cards describe their hero and set requirements in free text, e.g.
"Wei Generals", "Advisor with 3+ influence", "Female heroes",
"Dual-role heroes". This module turns that text into an explicit predicate:
a tuple of clauses, each one a small value type with its own match rule.

Detection is case-insensitive against a fixed vocabulary:
- Roles: General, Advisor, Tactician, Administrator (plural accepted)
- Allegiances: Shu, Wei, Wu, Rebels, Coalition, Han, Dong Zhuo
- Thresholds: "<N>+ <resource>", "<N> <resource>", "at least <N> <resource>"
- Flags: "dual-role" / "dual role", "female"

Clauses combine with AND. Inside a role or allegiance clause the listed
values combine with OR ("Generals or Advisors" matches either).

An empty text parses to None. Non-empty text with no recognised token parses
to a Requirement with no clauses; callers decide what that means.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from kingdomsim.config import ALLEGIANCES, RESOURCES, ROLES
from kingdomsim.models.cards import Hero

# Words naming each resource in requirement text
_RESOURCE_WORDS = {resource: resource for resource in RESOURCES} | {"supply": "supplies"}
_RESOURCE_PATTERN = "|".join(sorted(_RESOURCE_WORDS, key=len, reverse=True))

THRESHOLD_RE = re.compile(rf"(\d+)\s*\+?\s*({_RESOURCE_PATTERN})\b", re.IGNORECASE)
BARE_NUMBER_RE = re.compile(r"(\d+)\s*\+?")
DUAL_ROLE_RE = re.compile(r"\bdual[\s-]?role", re.IGNORECASE)
FEMALE_RE = re.compile(r"\bfemale", re.IGNORECASE)

_ROLE_RES = {role: re.compile(rf"\b{role}s?\b", re.IGNORECASE) for role in ROLES}
_ALLEGIANCE_RES = {
    allegiance: re.compile(rf"\b{re.escape(allegiance)}\b", re.IGNORECASE)
    for allegiance in ALLEGIANCES
}


# =============================================================================
# CLAUSES
# =============================================================================


@dataclass(frozen=True, slots=True)
class RoleClause:
    """Hero's primary or secondary role is one of `roles`."""

    roles: frozenset[str]

    def matches(self, hero: Hero) -> bool:
        wanted = {role.lower() for role in self.roles}
        return any(role.lower() in wanted for role in hero.roles)


@dataclass(frozen=True, slots=True)
class AllegianceClause:
    """Hero's allegiance is one of `allegiances`."""

    allegiances: frozenset[str]

    def matches(self, hero: Hero) -> bool:
        wanted = {allegiance.lower() for allegiance in self.allegiances}
        return hero.allegiance.lower() in wanted


@dataclass(frozen=True, slots=True)
class ResourceThresholdClause:
    """Hero grants at least `min_value` of `resource`."""

    resource: str
    min_value: int

    def matches(self, hero: Hero) -> bool:
        return hero.resources.get(self.resource) >= self.min_value


@dataclass(frozen=True, slots=True)
class DualRoleClause:
    """Hero has a secondary role."""

    def matches(self, hero: Hero) -> bool:
        return hero.has_dual_role


@dataclass(frozen=True, slots=True)
class FemaleClause:
    """Hero carries the female flag."""

    def matches(self, hero: Hero) -> bool:
        return hero.female


Clause = RoleClause | AllegianceClause | ResourceThresholdClause | DualRoleClause | FemaleClause


@dataclass(frozen=True, slots=True)
class Requirement:
    """
    Parsed requirement: every clause must hold.

    A clause type that is absent imposes no constraint.
    """

    text: str
    clauses: tuple[Clause, ...] = ()

    @property
    def is_recognized(self) -> bool:
        """True if at least one clause was detected in the text."""
        return bool(self.clauses)

    @property
    def roles(self) -> frozenset[str]:
        return frozenset(r for c in self.clauses if isinstance(c, RoleClause) for r in c.roles)

    @property
    def allegiances(self) -> frozenset[str]:
        return frozenset(
            a for c in self.clauses if isinstance(c, AllegianceClause) for a in c.allegiances
        )

    @property
    def resource_threshold(self) -> ResourceThresholdClause | None:
        return next((c for c in self.clauses if isinstance(c, ResourceThresholdClause)), None)

    @property
    def dual_role(self) -> bool:
        return any(isinstance(c, DualRoleClause) for c in self.clauses)

    @property
    def female(self) -> bool:
        return any(isinstance(c, FemaleClause) for c in self.clauses)


# =============================================================================
# PARSING
# =============================================================================


def detect_roles(text: str) -> list[str]:
    """Roles mentioned in the text, in vocabulary order."""
    return [role for role, pattern in _ROLE_RES.items() if pattern.search(text)]


def detect_allegiances(text: str) -> list[str]:
    """Allegiances mentioned in the text, in vocabulary order."""
    return [allegiance for allegiance, pattern in _ALLEGIANCE_RES.items() if pattern.search(text)]


def detect_threshold(text: str) -> ResourceThresholdClause | None:
    """First "<N>+ <resource>" pattern in the text."""
    match = THRESHOLD_RE.search(text)
    if not match:
        return None
    return ResourceThresholdClause(
        resource=_RESOURCE_WORDS[match.group(2).lower()],
        min_value=int(match.group(1)),
    )


def detect_bare_threshold(text: str) -> int | None:
    """First number in the text when no resource follows any number."""
    if THRESHOLD_RE.search(text):
        return None
    match = BARE_NUMBER_RE.search(text)
    return int(match.group(1)) if match else None


def parse_requirement(text: str | None) -> Requirement | None:
    """
    Parse requirement text into a Requirement.

    Args:
        text: Free-text requirement from a title card

    Returns:
        Requirement with the detected clauses, or None for empty text
    """
    if text is None or not text.strip():
        return None

    clauses: list[Clause] = []

    roles = detect_roles(text)
    if roles:
        clauses.append(RoleClause(frozenset(roles)))

    allegiances = detect_allegiances(text)
    if allegiances:
        clauses.append(AllegianceClause(frozenset(allegiances)))

    threshold = detect_threshold(text)
    if threshold is not None:
        clauses.append(threshold)

    if DUAL_ROLE_RE.search(text):
        clauses.append(DualRoleClause())

    if FEMALE_RE.search(text):
        clauses.append(FemaleClause())

    return Requirement(text=text, clauses=tuple(clauses))


def hero_matches(hero: Hero, requirement: Requirement) -> bool:
    """True if the hero satisfies every clause of the requirement."""
    return all(clause.matches(hero) for clause in requirement.clauses)


def matching_heroes(heroes: list[Hero], requirement: Requirement) -> list[Hero]:
    """Heroes satisfying the requirement, in input order."""
    return [hero for hero in heroes if hero_matches(hero, requirement)]


def first_match(heroes: list[Hero], predicate: Callable[[Hero], bool]) -> Hero | None:
    return next((hero for hero in heroes if predicate(hero)), None)
