"""
XLIFF translation memory: snapshots, documents and reconciliation, neutral
templates and two-way reinjection.
"""

from .snapshot import CanonicalSnapshot, build_snapshot
from .document import (
    XlfDocument,
    XlfEntry,
    MergeResult,
    merge_snapshot,
    get_translations,
    STATE_NEW,
    STATE_NEEDS_REVIEW,
    STATE_TRANSLATED,
    XLIFF_NAMESPACE,
)
from .neutral import make_neutral, strip_targets
from .reinjector import TwoWayReinjector, ReinjectionResult

__all__ = [
    'CanonicalSnapshot',
    'build_snapshot',
    'XlfDocument',
    'XlfEntry',
    'MergeResult',
    'merge_snapshot',
    'get_translations',
    'STATE_NEW',
    'STATE_NEEDS_REVIEW',
    'STATE_TRANSLATED',
    'XLIFF_NAMESPACE',
    'make_neutral',
    'strip_targets',
    'TwoWayReinjector',
    'ReinjectionResult',
]
