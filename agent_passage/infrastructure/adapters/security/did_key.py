"""did:key encoding for Ed25519 public keys.

    did:key:z<base58btc(0xed 0x01 || raw 32-byte public key)>

"z" is the multibase prefix for base58btc and 0xed01 the multicodec
varint for an Ed25519 public key. The encoding is deterministic, so a DID
identifies exactly one public key.
"""

from __future__ import annotations

from agent_passage.domain.models.identity import DID_KEY_PREFIX

ED25519_MULTICODEC: bytes = b"\xed\x01"
ED25519_PUBLIC_KEY_LENGTH: int = 32

_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX = {char: index for index, char in enumerate(_BASE58_ALPHABET)}


def _b58encode(data: bytes) -> str:
    number = int.from_bytes(data, "big")
    encoded = ""
    while number:
        number, remainder = divmod(number, 58)
        encoded = _BASE58_ALPHABET[remainder] + encoded
    leading_zeros = len(data) - len(data.lstrip(b"\x00"))
    return "1" * leading_zeros + encoded


def _b58decode(text: str) -> bytes:
    number = 0
    for char in text:
        if char not in _BASE58_INDEX:
            raise ValueError(f"Invalid base58 character: {char!r}")
        number = number * 58 + _BASE58_INDEX[char]
    leading_ones = len(text) - len(text.lstrip("1"))
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    return b"\x00" * leading_ones + body


def encode_did_key(public_key: bytes) -> str:
    """Encode a raw Ed25519 public key as a did:key identifier.

    Raises:
        ValueError: If public_key is not 32 bytes.
    """
    if len(public_key) != ED25519_PUBLIC_KEY_LENGTH:
        raise ValueError(
            f"Ed25519 public key must be {ED25519_PUBLIC_KEY_LENGTH} bytes, "
            f"got {len(public_key)}"
        )
    return DID_KEY_PREFIX + _b58encode(ED25519_MULTICODEC + public_key)


def decode_did_key(did: str) -> bytes:
    """Recover the raw Ed25519 public key from a did:key identifier.

    Args:
        did: "did:key:z..." identifier. A "#fragment" is ignored.

    Returns:
        The 32-byte public key.

    Raises:
        ValueError: If the DID is not an Ed25519 did:key.
    """
    did = did.split("#", 1)[0]
    if not did.startswith(DID_KEY_PREFIX):
        raise ValueError(f"Not a base58btc did:key: {did!r}")
    decoded = _b58decode(did[len(DID_KEY_PREFIX) :])
    if not decoded.startswith(ED25519_MULTICODEC):
        raise ValueError("did:key does not encode an Ed25519 public key")
    public_key = decoded[len(ED25519_MULTICODEC) :]
    if len(public_key) != ED25519_PUBLIC_KEY_LENGTH:
        raise ValueError(
            f"did:key public key must be {ED25519_PUBLIC_KEY_LENGTH} bytes, "
            f"got {len(public_key)}"
        )
    return public_key
