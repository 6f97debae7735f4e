"""Canonical marker codec.

Serializes EXIT and ARRIVAL markers to and from their JSON interchange
form. Encoding is canonical so that signatures, which are computed over
the encoded bytes, do not depend on cosmetic structure.

Canonical form:
- JSON, sorted keys, no whitespace (separators=(",", ":"))
- UTF-8, non-ASCII characters kept as-is (ensure_ascii=False)
- Timestamps as ISO 8601 UTC with microseconds and a trailing "Z"
- Absent optional fields are omitted, never written as null

Content identifiers:
    urn:exit:<sha256 of canonical form without id and proof>
    urn:arrival:<sha256 of canonical form without id and proof>

Signable payload:
    canonical form without proof (the id is covered by the signature)
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Union

from pydantic import ValidationError

from agent_passage.application.dtos.marker_wire import (
    ArrivalMarkerWire,
    ExitMarkerWire,
    MarkerProofWire,
)
from agent_passage.domain.errors import DecodeError
from agent_passage.domain.models.arrival_marker import ArrivalMarker
from agent_passage.domain.models.exit_marker import (
    ExitMarker,
    LineageModule,
    StateSnapshotModule,
)
from agent_passage.domain.models.proof import MarkerProof

Marker = Union[ExitMarker, ArrivalMarker]
MarkerInput = Union[str, bytes, Mapping[str, Any]]

EXIT_ID_PREFIX: str = "urn:exit:"
ARRIVAL_ID_PREFIX: str = "urn:arrival:"


def format_timestamp(value: datetime) -> str:
    """Render a timezone-aware datetime in canonical UTC form.

    Raises:
        ValueError: If value is naive.
    """
    if value.tzinfo is None:
        raise ValueError("Marker timestamps must be timezone-aware")
    # Always a four-digit year
    rendered = value.astimezone(timezone.utc).isoformat(timespec="microseconds")
    return rendered.replace("+00:00", "Z")


def canonical_json(data: Mapping[str, Any]) -> str:
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


# =============================================================================
# Marker -> dict
# =============================================================================


def _proof_to_dict(proof: MarkerProof) -> dict[str, Any]:
    return {
        "type": proof.type,
        "created": format_timestamp(proof.created),
        "verificationMethod": proof.verification_method,
        "proofValue": proof.proof_value,
    }


def _lineage_to_dict(lineage: LineageModule) -> dict[str, Any]:
    data: dict[str, Any] = {"lineageChain": list(lineage.lineage_chain)}
    if lineage.predecessor is not None:
        data["predecessor"] = lineage.predecessor
    if lineage.continuity_proof is not None:
        data["continuityProof"] = lineage.continuity_proof
    return data


def _snapshot_to_dict(snapshot: StateSnapshotModule) -> dict[str, Any]:
    data: dict[str, Any] = {
        "stateHash": snapshot.state_hash,
        "obligations": list(snapshot.obligations),
    }
    if snapshot.state_location is not None:
        data["stateLocation"] = snapshot.state_location
    return data


def _exit_body(marker: ExitMarker) -> dict[str, Any]:
    data: dict[str, Any] = {
        "specVersion": marker.spec_version,
        "subject": marker.subject,
        "origin": marker.origin,
        "exitType": marker.exit_type.value,
        "timestamp": format_timestamp(marker.timestamp),
    }
    if marker.reason is not None:
        data["reason"] = marker.reason
    if marker.lineage is not None:
        data["lineage"] = _lineage_to_dict(marker.lineage)
    if marker.state_snapshot is not None:
        data["stateSnapshot"] = _snapshot_to_dict(marker.state_snapshot)
    return data


def _arrival_body(marker: ArrivalMarker) -> dict[str, Any]:
    return {
        "specVersion": marker.spec_version,
        "exitMarkerId": marker.exit_marker_id,
        "subject": marker.subject,
        "destination": marker.destination,
        "timestamp": format_timestamp(marker.timestamp),
    }


def _body(marker: Marker) -> dict[str, Any]:
    if isinstance(marker, ExitMarker):
        return _exit_body(marker)
    if isinstance(marker, ArrivalMarker):
        return _arrival_body(marker)
    raise TypeError(f"Not a marker: {type(marker).__name__}")


def to_dict(marker: Marker) -> dict[str, Any]:
    """Full interchange dict for a marker (id and proof included)."""
    data = _body(marker)
    data["id"] = marker.id
    if marker.proof is not None:
        data["proof"] = _proof_to_dict(marker.proof)
    return data


# =============================================================================
# Encoding
# =============================================================================


def encode(marker: Marker) -> str:
    """Encode a marker in canonical JSON form.

    Identical logical content always yields identical text.

    Args:
        marker: EXIT or ARRIVAL marker, signed or not.

    Returns:
        Canonical JSON string.
    """
    return canonical_json(to_dict(marker))


def encode_exit(marker: ExitMarker) -> str:
    """Encode an EXIT marker in canonical JSON form."""
    return encode(marker)


def encode_arrival(marker: ArrivalMarker) -> str:
    """Encode an ARRIVAL marker in canonical JSON form."""
    return encode(marker)


def content_id(marker: Marker) -> str:
    """Compute the content-derived id of a marker.

    The digest covers every field except id and proof, so it can be
    computed before the id is assigned and before signing.
    """
    digest = hashlib.sha256(canonical_json(_body(marker)).encode("utf-8")).hexdigest()
    prefix = EXIT_ID_PREFIX if isinstance(marker, ExitMarker) else ARRIVAL_ID_PREFIX
    return f"{prefix}{digest}"


def signable_payload(marker: Marker) -> bytes:
    """Bytes covered by a marker's proof.

    Everything except the proof itself, in canonical form.
    """
    data = _body(marker)
    data["id"] = marker.id
    return canonical_json(data).encode("utf-8")


# =============================================================================
# Decoding
# =============================================================================


def _load(data: MarkerInput, marker_kind: str) -> dict[str, Any]:
    if isinstance(data, Mapping):
        return dict(data)
    try:
        loaded = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"invalid JSON: {e}", marker_kind=marker_kind) from e
    if not isinstance(loaded, dict):
        raise DecodeError(
            f"expected a JSON object, got {type(loaded).__name__}",
            marker_kind=marker_kind,
        )
    return loaded


def _field_errors(error: ValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
        for err in error.errors()
    ]


def _validation_error(error: ValidationError, marker_kind: str) -> DecodeError:
    field_errors = _field_errors(error)
    summary = "; ".join(f"{fe['loc']}: {fe['msg']}" for fe in field_errors)
    return DecodeError(
        f"invalid fields ({summary})",
        marker_kind=marker_kind,
        field_errors=field_errors,
    )


def _proof_from_wire(wire: MarkerProofWire | None) -> MarkerProof | None:
    if wire is None:
        return None
    return MarkerProof(
        type=wire.type,
        created=wire.created,
        verification_method=wire.verification_method,
        proof_value=wire.proof_value,
    )


def decode_exit(data: MarkerInput) -> ExitMarker:
    """Decode an EXIT marker.

    Args:
        data: JSON text/bytes, or an already-parsed JSON object.

    Returns:
        The decoded ExitMarker.

    Raises:
        DecodeError: If the input is not JSON, not an object, or any
            field is missing, malshaped or outside its closed enum.
    """
    raw = _load(data, "exit")
    try:
        wire = ExitMarkerWire.model_validate(raw)
    except ValidationError as e:
        raise _validation_error(e, "exit") from e

    try:
        return _exit_from_wire(wire)
    except ValueError as e:
        raise DecodeError(str(e), marker_kind="exit") from e


def _exit_from_wire(wire: ExitMarkerWire) -> ExitMarker:
    lineage = None
    if wire.lineage is not None:
        lineage = LineageModule(
            predecessor=wire.lineage.predecessor,
            lineage_chain=tuple(wire.lineage.lineage_chain),
            continuity_proof=wire.lineage.continuity_proof,
        )
    snapshot = None
    if wire.state_snapshot is not None:
        snapshot = StateSnapshotModule(
            state_hash=wire.state_snapshot.state_hash,
            state_location=wire.state_snapshot.state_location,
            obligations=tuple(wire.state_snapshot.obligations),
        )

    return ExitMarker(
        id=wire.id,
        subject=wire.subject,
        origin=wire.origin,
        exit_type=wire.exit_type,
        timestamp=wire.timestamp,
        reason=wire.reason,
        lineage=lineage,
        state_snapshot=snapshot,
        proof=_proof_from_wire(wire.proof),
        spec_version=wire.spec_version,
    )


def decode_arrival(data: MarkerInput) -> ArrivalMarker:
    """Decode an ARRIVAL marker.

    Raises:
        DecodeError: If the input is malformed.
    """
    raw = _load(data, "arrival")
    try:
        wire = ArrivalMarkerWire.model_validate(raw)
    except ValidationError as e:
        raise _validation_error(e, "arrival") from e

    return ArrivalMarker(
        id=wire.id,
        exit_marker_id=wire.exit_marker_id,
        subject=wire.subject,
        destination=wire.destination,
        timestamp=wire.timestamp,
        proof=_proof_from_wire(wire.proof),
        spec_version=wire.spec_version,
    )


def decode(data: MarkerInput) -> Marker:
    """Decode a marker of either kind.

    The kind is taken from the structure: "exitType" marks an EXIT
    marker, "exitMarkerId" an ARRIVAL marker.

    Raises:
        DecodeError: If the kind cannot be determined or decoding fails.
    """
    raw = _load(data, "")
    is_exit = "exitType" in raw
    is_arrival = "exitMarkerId" in raw
    if is_exit and not is_arrival:
        return decode_exit(raw)
    if is_arrival and not is_exit:
        return decode_arrival(raw)
    raise DecodeError("structure matches no marker kind (expected exitType or exitMarkerId)")
