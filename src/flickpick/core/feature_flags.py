"""Engine experiments that can be switched on without code changes.

Flags are read once, when ``Settings.from_env()`` parses ``FLICKPICK_FEATURES``
(a comma-separated, case-insensitive list) and travel with the settings
object, so every engine decides from the same frozen set.  Names that match
no known flag are logged and dropped rather than silently ignored.
"""

from __future__ import annotations

import logging
from enum import Enum

logger = logging.getLogger(__name__)

ENV_VAR = "FLICKPICK_FEATURES"


class FeatureFlag(str, Enum):
    # Keep per-item approval sets up to date instead of rescanning the log.
    INCREMENTAL_TALLY = "consensus.incremental_tally"


def parse_flags(raw: str | None) -> frozenset[FeatureFlag]:
    flags: set[FeatureFlag] = set()
    for entry in (raw or "").split(","):
        name = entry.strip().lower()
        if not name:
            continue
        try:
            flags.add(FeatureFlag(name))
        except ValueError:
            logger.warning(
                "Ignoring unknown feature flag",
                extra={"flag": name, "known": sorted(flag.value for flag in FeatureFlag)},
            )
    return frozenset(flags)
