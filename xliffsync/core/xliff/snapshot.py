"""
Canonical snapshot of one artifact's translatable strings.

A snapshot is the ordered list of units an adapter produced for one artifact
during one conversion pass. Resource artifacts are filtered here so that
typed values, designer metadata and empty strings never reach a
translation-memory document.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List

from xliffsync.core.adapters.interfaces import IExtractable
from xliffsync.core.adapters.resx_adapter import ResxAdapter, exclusion_reason
from xliffsync.core.adapters.translation_unit import TranslationUnit

logger = logging.getLogger(__name__)


@dataclass
class CanonicalSnapshot:
    """
    Ordered translation units of one artifact at one point in time.

    Attributes:
        artifact: Path of the artifact the units came from
        units: Units in source-document order
        excluded: Count of filtered resource entries per exclusion reason
    """
    artifact: Path
    units: List[TranslationUnit] = field(default_factory=list)
    excluded: Dict[str, int] = field(default_factory=dict)

    @property
    def has_strings(self) -> bool:
        """True if at least one unit survived filtering."""
        return bool(self.units)

    def ids(self) -> List[str]:
        return [unit.unit_id for unit in self.units]

    def __iter__(self) -> Iterator[TranslationUnit]:
        return iter(self.units)

    def __len__(self) -> int:
        return len(self.units)


def build_snapshot(adapter: IExtractable) -> CanonicalSnapshot:
    """
    Run an adapter's extraction and normalize it into a snapshot.

    Args:
        adapter: Adapter for the artifact

    Returns:
        The snapshot; check ``has_strings`` before using it

    Raises:
        MalformedSourceError: If the artifact cannot be parsed
    """
    snapshot = CanonicalSnapshot(artifact=adapter.path)

    if isinstance(adapter, ResxAdapter):
        reasons = Counter()
        for entry in adapter.iter_entries():
            reason = exclusion_reason(entry)
            if reason is not None:
                reasons[reason] += 1
                logger.debug(f"{adapter.path.name}: skipping '{entry.name}' ({reason})")
                continue
            snapshot.units.append(entry.to_unit())
        snapshot.excluded = dict(reasons)
    else:
        snapshot.units.extend(adapter.extract())

    logger.debug(
        f"Snapshot of {adapter.path.name}: {len(snapshot)} units"
        + (f", excluded {snapshot.excluded}" if snapshot.excluded else "")
    )
    return snapshot
