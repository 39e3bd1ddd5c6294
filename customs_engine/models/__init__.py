"""Pydantic validation models."""

# Input records
from customs_engine.models.records import (
    Item,
    DeclarationLine,
    normalize_country,
)

# Classification
from customs_engine.models.classification import (
    Classification,
    ClassificationMethod,
)

# Matching
from customs_engine.models.matching import (
    MatchSource,
    MatchCandidate,
    MatchOutcome,
)

# Reconciliation
from customs_engine.models.reconciliation import (
    Change,
    ChangeKind,
    ReconcileResult,
    SkuSyncStatus,
    SkuSyncEntry,
    SkuSyncResult,
)

# Resolution
from customs_engine.models.resolution import (
    ResolutionSource,
    SkuResolution,
    SkuResolutionResult,
)

__all__ = [
    "Item",
    "DeclarationLine",
    "normalize_country",
    "Classification",
    "ClassificationMethod",
    "MatchSource",
    "MatchCandidate",
    "MatchOutcome",
    "Change",
    "ChangeKind",
    "ReconcileResult",
    "SkuSyncStatus",
    "SkuSyncEntry",
    "SkuSyncResult",
    "ResolutionSource",
    "SkuResolution",
    "SkuResolutionResult",
]
