"""Content pool assembly at the boundary with the content supplier.

The pool assembled here is the single shared ground truth for a session:
every participant's queue is a reordering of it and it is never refetched
mid-session.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ...core.errors import EmptyPoolError
from ...core.models import Item
from ...core.shuffle import seeded_shuffle
from ...data.catalog import ContentSupplier, StaticCatalog

__all__ = ["assemble_pool", "dedupe_by_title", "normalize_title"]

logger = logging.getLogger(__name__)


def normalize_title(title: str) -> str:
    return title.strip().lower()


def dedupe_by_title(items: Sequence[Item]) -> list[Item]:
    """Drop near-duplicates (same trimmed, case-folded title) and repeated ids."""

    seen_titles: set[str] = set()
    seen_ids: set[str] = set()
    unique: list[Item] = []
    for item in items:
        key = normalize_title(item.title)
        if key in seen_titles or item.id in seen_ids:
            continue
        seen_titles.add(key)
        seen_ids.add(item.id)
        unique.append(item)
    return unique


def _fallback_pool(fallback: StaticCatalog, session_seed: str, exclude_ids: set[str]) -> list[Item]:
    items = dedupe_by_title(fallback.items())
    if not items:
        raise EmptyPoolError("no titles available from the catalog or the built-in fallback")
    remaining = [item for item in items if item.id not in exclude_ids]
    if not remaining:
        logger.warning(
            "Session memory excludes every fallback title; ignoring exclusions",
            extra={"excluded": len(exclude_ids), "fallback": len(items)},
        )
        remaining = items
    return seeded_shuffle(remaining, session_seed)


async def assemble_pool(
    supplier: ContentSupplier | None,
    fallback: StaticCatalog,
    session_seed: str,
    exclude_ids: set[str],
) -> list[Item]:
    """Fetch, deduplicate and filter a candidate pool; never fails on supplier errors.

    Only a fallback catalog that is itself empty raises ``EmptyPoolError``.
    """

    if supplier is None:
        logger.info("No content supplier configured; using fallback titles", extra={"seed": session_seed})
        return _fallback_pool(fallback, session_seed, exclude_ids)

    try:
        fetched = list(await supplier.fetch_pool(set(exclude_ids)))
    except Exception:
        logger.warning("Content supplier failed; using fallback titles", extra={"seed": session_seed}, exc_info=True)
        return _fallback_pool(fallback, session_seed, exclude_ids)

    pool = [item for item in dedupe_by_title(fetched) if item.id not in exclude_ids]
    if not pool:
        logger.info(
            "Content supplier returned no usable titles; using fallback titles",
            extra={"seed": session_seed, "fetched": len(fetched)},
        )
        return _fallback_pool(fallback, session_seed, exclude_ids)
    logger.debug("Pool assembled", extra={"seed": session_seed, "size": len(pool)})
    return pool
