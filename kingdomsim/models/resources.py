"""
Resource bundle arithmetic.

A bundle holds the four resource counters. Bundles describing a card's own
stats may be negative (a card that drains a resource when deployed).
Bundles describing available totals are never negative: use clamped().

All functions here are pure.
"""

from dataclasses import dataclass
from typing import Any

from kingdomsim.config import RESOURCES


@dataclass(frozen=True, slots=True)
class ResourceBundle:
    """
    The four resource counters.

    Attributes:
        military: Military strength
        influence: Court influence
        supplies: Supplies and logistics
        piety: Piety and popular support
    """

    military: int = 0
    influence: int = 0
    supplies: int = 0
    piety: int = 0

    @classmethod
    def from_mapping(cls, values: dict[str, Any] | None) -> "ResourceBundle":
        """Build a bundle from a resource-name mapping, treating gaps as 0."""
        if not values:
            return cls()
        return cls(**{res: int(values.get(res) or 0) for res in RESOURCES})

    def get(self, resource: str) -> int:
        """Value of a single resource by name."""
        if resource not in RESOURCES:
            raise KeyError(f"Unknown resource: {resource}")
        value: int = getattr(self, resource)
        return value

    def as_dict(self) -> dict[str, int]:
        return {res: getattr(self, res) for res in RESOURCES}

    def __add__(self, other: "ResourceBundle") -> "ResourceBundle":
        return add(self, other)

    def total(self) -> int:
        """Sum of all four components."""
        return self.military + self.influence + self.supplies + self.piety

    def clamped(self) -> "ResourceBundle":
        """Copy with every negative component raised to 0."""
        return ResourceBundle(
            military=max(0, self.military),
            influence=max(0, self.influence),
            supplies=max(0, self.supplies),
            piety=max(0, self.piety),
        )

    def with_added(self, resource: str, amount: int) -> "ResourceBundle":
        """Copy with `amount` added to one resource."""
        values = self.as_dict()
        values[resource] = self.get(resource) + amount
        return ResourceBundle(**values)


ZERO = ResourceBundle()


def add(a: ResourceBundle, b: ResourceBundle) -> ResourceBundle:
    """Component-wise sum of two bundles."""
    return ResourceBundle(
        military=a.military + b.military,
        influence=a.influence + b.influence,
        supplies=a.supplies + b.supplies,
        piety=a.piety + b.piety,
    )


def total(bundle: ResourceBundle) -> int:
    """Sum of a bundle's components."""
    return bundle.total()


def cost_of(item: Any) -> ResourceBundle:
    """
    Purchase cost of a card: its stats with negatives zeroed.

    Accepts anything exposing the four resource attributes (a Hero or a
    ResourceBundle), so cost_of(cost_of(x)) == cost_of(x).
    """
    return ResourceBundle(
        military=max(0, getattr(item, "military", 0) or 0),
        influence=max(0, getattr(item, "influence", 0) or 0),
        supplies=max(0, getattr(item, "supplies", 0) or 0),
        piety=max(0, getattr(item, "piety", 0) or 0),
    )


def can_afford(cost: ResourceBundle, available: ResourceBundle) -> bool:
    """True if every component of `available` covers the matching cost."""
    return all(available.get(res) >= cost.get(res) for res in RESOURCES)


def shortfall(cost: ResourceBundle, available: ResourceBundle) -> ResourceBundle:
    """Per-resource amount still missing to cover `cost` (0 where covered)."""
    return ResourceBundle(
        **{res: max(0, cost.get(res) - available.get(res)) for res in RESOURCES}
    )
