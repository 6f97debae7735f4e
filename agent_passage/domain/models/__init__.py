"""Domain models for Agent Passage."""

from agent_passage.domain.models.admission import (
    EMERGENCY_ONLY,
    OPEN_DOOR,
    STRICT,
    AdmissionPolicy,
    AdmissionResult,
)
from agent_passage.domain.models.arrival_marker import ArrivalMarker
from agent_passage.domain.models.exit_marker import (
    MODULE_LINEAGE,
    MODULE_STATE_SNAPSHOT,
    ExitMarker,
    ExitType,
    LineageModule,
    StateSnapshotModule,
)
from agent_passage.domain.models.identity import Identity
from agent_passage.domain.models.proof import MarkerProof
from agent_passage.domain.models.transfer import ContinuityResult, TransferRecord
from agent_passage.domain.models.verification import VerificationResult

__all__ = [
    "AdmissionPolicy",
    "AdmissionResult",
    "ArrivalMarker",
    "ContinuityResult",
    "EMERGENCY_ONLY",
    "ExitMarker",
    "ExitType",
    "Identity",
    "LineageModule",
    "MODULE_LINEAGE",
    "MODULE_STATE_SNAPSHOT",
    "MarkerProof",
    "OPEN_DOOR",
    "STRICT",
    "StateSnapshotModule",
    "TransferRecord",
    "VerificationResult",
]
