"""Application DTOs: interchange wire models and passage results."""

from agent_passage.application.dtos.passage import (
    AdmissionDecisionDTO,
    AdmissionEvaluationDTO,
    ExitMarkerIssuedDTO,
    IdentityDTO,
    MarkerVerificationDTO,
    PolicyListingDTO,
)

__all__ = [
    "AdmissionDecisionDTO",
    "AdmissionEvaluationDTO",
    "ExitMarkerIssuedDTO",
    "IdentityDTO",
    "MarkerVerificationDTO",
    "PolicyListingDTO",
]
