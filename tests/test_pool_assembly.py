from __future__ import annotations

import asyncio
from collections.abc import Sequence

import pytest

from flickpick.core.errors import EmptyPoolError
from flickpick.core.models import Item
from flickpick.core.shuffle import seeded_shuffle
from flickpick.data.catalog import StaticCatalog
from flickpick.features.session.pool import assemble_pool, dedupe_by_title


def _item(item_id: str, title: str | None = None) -> Item:
    return Item(id=item_id, title=title or f"Title {item_id}", category="Comedy", duration_minutes=30, rating=8.0)


class _Supplier:
    def __init__(self, items: Sequence[Item] = (), error: Exception | None = None) -> None:
        self.items = list(items)
        self.error = error
        self.calls: list[set[str]] = []

    async def fetch_pool(self, exclude_ids: set[str]) -> list[Item]:
        self.calls.append(set(exclude_ids))
        if self.error is not None:
            raise self.error
        return list(self.items)


FALLBACK = StaticCatalog(items=[_item(f"f{n}") for n in range(5)])


def _assemble(supplier, fallback=FALLBACK, seed="seed", exclude=frozenset()):
    return asyncio.run(assemble_pool(supplier, fallback, seed, set(exclude)))


def test_without_supplier_uses_seed_shuffled_fallback():
    pool = _assemble(None, seed="session_1")
    assert pool == seeded_shuffle(FALLBACK.items(), "session_1")


def test_supplier_error_falls_back_without_raising():
    supplier = _Supplier(error=RuntimeError("catalog down"))
    pool = _assemble(supplier, seed="session_2")
    assert pool == seeded_shuffle(FALLBACK.items(), "session_2")
    assert len(supplier.calls) == 1


def test_empty_supplier_result_falls_back():
    pool = _assemble(_Supplier([]))
    assert {item.id for item in pool} == {item.id for item in FALLBACK.items()}


def test_supplier_pool_is_deduplicated_and_filtered_in_order():
    supplier = _Supplier(
        [
            _item("a", "The Office"),
            _item("b", "  the office "),
            _item("c", "Friends"),
            _item("d", "Succession"),
            _item("c", "Friends (again)"),
        ]
    )

    pool = _assemble(supplier, exclude={"d"})

    assert [item.id for item in pool] == ["a", "c"]
    assert supplier.calls == [{"d"}]


def test_fully_excluded_supplier_result_falls_back():
    pool = _assemble(_Supplier([_item("a")]), exclude={"a"})
    assert {item.id for item in pool} <= {item.id for item in FALLBACK.items()}
    assert pool


def test_fallback_honours_exclusions_when_possible():
    pool = _assemble(None, exclude={"f0", "f1"})
    assert {item.id for item in pool} == {"f2", "f3", "f4"}


def test_fallback_ignores_exclusions_that_would_empty_it():
    pool = _assemble(None, exclude={item.id for item in FALLBACK.items()})
    assert len(pool) == len(FALLBACK)


def test_empty_fallback_is_an_actionable_error():
    with pytest.raises(EmptyPoolError):
        _assemble(_Supplier(error=RuntimeError("down")), fallback=StaticCatalog(items=[]))


def test_bundled_fallback_catalog_loads():
    items = StaticCatalog().items()
    assert len(items) == 10
    assert len({item.id for item in items}) == 10
    assert dedupe_by_title(items) == items
