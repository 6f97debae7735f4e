"""Marker construction.

Builds unsigned markers with their content-derived ids. Signing happens
afterwards through MarkerSigningService.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from agent_passage.application.services import marker_codec
from agent_passage.domain.models.arrival_marker import ArrivalMarker
from agent_passage.domain.models.exit_marker import (
    ExitMarker,
    ExitType,
    LineageModule,
    StateSnapshotModule,
)


def create_exit_marker(
    *,
    subject: str,
    origin: str,
    timestamp: datetime,
    exit_type: ExitType = ExitType.VOLUNTARY,
    reason: str | None = None,
    lineage: LineageModule | None = None,
    state_snapshot: StateSnapshotModule | None = None,
) -> ExitMarker:
    """Create an unsigned EXIT marker.

    Args:
        subject: Departing agent identifier.
        origin: Platform being left.
        timestamp: Creation instant (timezone-aware).
        exit_type: Kind of departure (default: Voluntary).
        reason: Optional free-text reason.
        lineage: Optional lineage module.
        state_snapshot: Optional state snapshot module.

    Returns:
        Unsigned ExitMarker with its content id set.

    Raises:
        ValueError: If subject or origin is empty, or timestamp is naive.
    """
    if not subject.strip() or not origin.strip():
        raise ValueError("subject and origin must be non-empty")
    if timestamp.tzinfo is None:
        raise ValueError("timestamp must be timezone-aware")

    draft = ExitMarker(
        id="",
        subject=subject,
        origin=origin,
        exit_type=exit_type,
        timestamp=timestamp,
        reason=reason,
        lineage=lineage,
        state_snapshot=state_snapshot,
    )
    return replace(draft, id=marker_codec.content_id(draft))


def create_arrival_marker(
    exit_marker: ExitMarker, *, destination: str, timestamp: datetime
) -> ArrivalMarker:
    """Create an unsigned ARRIVAL marker following an EXIT marker.

    Raises:
        ValueError: If destination is empty or timestamp is naive.
    """
    if not destination.strip():
        raise ValueError("destination must be non-empty")
    if timestamp.tzinfo is None:
        raise ValueError("timestamp must be timezone-aware")

    draft = ArrivalMarker(
        id="",
        exit_marker_id=exit_marker.id,
        subject=exit_marker.subject,
        destination=destination,
        timestamp=timestamp,
    )
    return replace(draft, id=marker_codec.content_id(draft))
