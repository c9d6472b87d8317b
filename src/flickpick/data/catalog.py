from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from ..core.models import Item


class ContentSupplier(Protocol):
    """Anything that can hand the engine a candidate pool.

    Implementations may blend sub-sources and apply their own filters; they
    are allowed to fail, the engine falls back to static data.
    """

    async def fetch_pool(self, exclude_ids: set[str]) -> Sequence[Item]: ...


@dataclass(slots=True)
class StaticCatalogConfig:
    resource: Path


def item_from_mapping(raw: Mapping[str, Any]) -> Item:
    year = raw.get("year")
    return Item(
        id=str(raw["id"]),
        title=str(raw["title"]),
        category=str(raw.get("category") or "Unknown"),
        duration_minutes=int(raw.get("duration_minutes") or 0),
        rating=float(raw.get("rating") or 0.0),
        description=raw.get("description"),
        year=int(year) if year is not None else None,
        poster_url=str(raw.get("poster_url") or ""),
    )


class StaticCatalog:
    """Built-in title list used whenever the remote catalog yields nothing."""

    def __init__(self, config: StaticCatalogConfig | None = None, *, items: Sequence[Item] | None = None) -> None:
        if items is not None:
            self._items = tuple(items)
            return
        resource = config.resource if config else Path(__file__).with_name("fallback_titles.json")
        self._items = self._load_resource(resource)

    @staticmethod
    def _load_resource(path: Path) -> tuple[Item, ...]:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, list):
            raise ValueError("Invalid fallback catalog payload")
        return tuple(item_from_mapping(entry) for entry in data)

    def items(self) -> list[Item]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    async def fetch_pool(self, exclude_ids: set[str]) -> list[Item]:
        return [item for item in self._items if item.id not in exclude_ids]
