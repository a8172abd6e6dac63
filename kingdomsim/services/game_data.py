"""
Game data loading.

Builds the immutable GameData snapshot the engine runs on. Sources are
injected: the engine never reaches for files or caches on its own.

Record-level problems are recovered (invalid records are skipped, duplicate
ids keep the first record, each with a warning). A missing collection is
caller misuse and raises GameDataError.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol, TypeVar

from pydantic import ValidationError

from kingdomsim.models.cards import EventCard, Hero, Title
from kingdomsim.models.failure import FailureKind, GameDataError
from kingdomsim.models.game_data import GameData
from kingdomsim.parsers.records import EventRecord, HeroRecord, TitleRecord

logger = logging.getLogger(__name__)

HEROES_FILE = "heroes.json"
TITLES_FILE = "titles.json"
EVENTS_FILE = "events.json"

_Card = TypeVar("_Card", Hero, Title, EventCard)


class GameDataSource(Protocol):
    """Anything that can produce a GameData snapshot."""

    def load(self) -> GameData: ...


def _convert(
    collection: str,
    raw: Any,
    record_type: type[HeroRecord] | type[TitleRecord] | type[EventRecord],
) -> list[Any]:
    if raw is None:
        raise GameDataError(f"Missing {collection} collection")
    if not isinstance(raw, list):
        raise GameDataError(
            f"{collection} must be a list of records",
            detail=f"got {type(raw).__name__}",
            kind=FailureKind.INVALID_DATA,
        )

    cards = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            logger.warning("Skipping %s record %d: not an object", collection, index)
            continue
        try:
            cards.append(record_type.model_validate(item).to_model())
        except ValidationError as e:
            logger.warning(
                "Skipping %s record %d: %d validation errors",
                collection,
                index,
                e.error_count(),
            )
    return cards


def _dedupe(collection: str, cards: Iterable[_Card]) -> tuple[_Card, ...]:
    seen: set[str] = set()
    unique: list[_Card] = []
    for card in cards:
        if card.id in seen:
            logger.warning("Duplicate %s id %s; keeping the first", collection, card.id)
            continue
        seen.add(card.id)
        unique.append(card)
    return tuple(unique)


def build_game_data(heroes: Any, titles: Any, events: Any) -> GameData:
    """
    Validate raw collections and build a snapshot.

    Args:
        heroes: List of raw hero records
        titles: List of raw title records
        events: List of raw event records

    Returns:
        GameData snapshot

    Raises:
        GameDataError: If a collection is missing or not a list
    """
    data = GameData(
        heroes=_dedupe("hero", _convert("heroes", heroes, HeroRecord)),
        titles=_dedupe("title", _convert("titles", titles, TitleRecord)),
        events=_dedupe("event", _convert("events", events, EventRecord)),
    )
    logger.info(
        "Loaded %d heroes, %d titles, %d events",
        len(data.heroes),
        len(data.titles),
        len(data.events),
    )
    return data


class InMemorySource:
    """Source wrapping records that are already in memory."""

    def __init__(self, heroes: Any, titles: Any, events: Any):
        self.heroes = heroes
        self.titles = titles
        self.events = events

    def load(self) -> GameData:
        return build_game_data(self.heroes, self.titles, self.events)


class JsonDirectorySource:
    """
    Source reading heroes.json, titles.json and events.json from a directory.

    Each file holds either a list of records or an object with the list under
    its collection name ({"heroes": [...]}).
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read(self, filename: str, collection: str) -> Any:
        file_path = self.path / filename
        if not file_path.exists():
            raise GameDataError(
                f"Missing {collection} data file",
                detail=str(file_path),
            )
        try:
            with open(file_path, encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise GameDataError(
                f"Invalid JSON in {filename}",
                detail=str(e),
                kind=FailureKind.INVALID_DATA,
            ) from e

        if isinstance(payload, dict):
            return payload.get(collection)
        return payload

    def load(self) -> GameData:
        return build_game_data(
            self._read(HEROES_FILE, "heroes"),
            self._read(TITLES_FILE, "titles"),
            self._read(EVENTS_FILE, "events"),
        )


def load_game_data(source: GameDataSource) -> GameData:
    """Load a snapshot from any source."""
    return source.load()
