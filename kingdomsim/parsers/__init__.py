from kingdomsim.parsers.records import EventRecord, HeroRecord, TitleRecord
from kingdomsim.parsers.requirements import (
    AllegianceClause,
    DualRoleClause,
    FemaleClause,
    Requirement,
    ResourceThresholdClause,
    RoleClause,
    hero_matches,
    matching_heroes,
    parse_requirement,
)

__all__ = [
    "AllegianceClause",
    "DualRoleClause",
    "EventRecord",
    "FemaleClause",
    "HeroRecord",
    "Requirement",
    "ResourceThresholdClause",
    "RoleClause",
    "TitleRecord",
    "hero_matches",
    "matching_heroes",
    "parse_requirement",
]
