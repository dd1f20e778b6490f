"""Key encoding (NIP-19) and BIP-340 signing for Nostr events."""

from __future__ import annotations

import hashlib
import os
from typing import TYPE_CHECKING

import bech32
from coincurve.keys import PrivateKey

from ..core.exceptions import SigningError

if TYPE_CHECKING:
    from .event import Event


def _decode(expected_hrp: str, value: str) -> str:
    hrp, data = bech32.bech32_decode(value.strip())
    if hrp is None or data is None:
        raise SigningError(f"Invalid bech32 string for {expected_hrp}")
    if hrp != expected_hrp:
        raise SigningError(f"Expected {expected_hrp}, got {hrp}")
    raw = bech32.convertbits(data, 5, 8, False)
    if raw is None or len(raw) != 32:
        raise SigningError(f"Invalid {expected_hrp} payload length")
    return bytes(raw).hex()


def _encode(hrp: str, hex_key: str) -> str:
    try:
        raw = bytes.fromhex(hex_key)
    except ValueError as e:
        raise SigningError(f"Invalid hex key for {hrp}") from e
    if len(raw) != 32:
        raise SigningError(f"Invalid key length for {hrp}: {len(raw)}")
    return bech32.bech32_encode(hrp, bech32.convertbits(raw, 8, 5))


def decode_nsec(nsec: str) -> str:
    """nsec1… → 64-char hex secret key."""
    return _decode("nsec", nsec)


def decode_npub(npub: str) -> str:
    """npub1… → 64-char hex public key."""
    return _decode("npub", npub)


def encode_npub(pubkey: str) -> str:
    return _encode("npub", pubkey)


def encode_nsec(secret: str) -> str:
    return _encode("nsec", secret)


class Signer:
    """Holds one secret key and signs events with it.

    Accepts either an ``nsec1…`` string or a raw 64-char hex key.
    """

    def __init__(self, secret: str):
        secret = secret.strip()
        if not secret:
            raise SigningError("Signing key is empty (set BOT_NSEC)")
        secret_hex = decode_nsec(secret) if secret.startswith("nsec1") else secret
        try:
            self._key = PrivateKey(bytes.fromhex(secret_hex))
        except ValueError as e:
            raise SigningError("Invalid secret key") from e
        # x-only public key: drop the parity byte of the compressed point
        self.public_key = self._key.public_key.format(compressed=True)[1:].hex()

    @classmethod
    def generate(cls) -> "Signer":
        return cls(PrivateKey().secret.hex())

    @property
    def npub(self) -> str:
        return encode_npub(self.public_key)

    def sign_digest(self, digest: bytes) -> str:
        if len(digest) != 32:
            raise SigningError("Schnorr signatures need a 32-byte digest")
        return self._key.sign_schnorr(digest, os.urandom(32)).hex()

    def sign(self, event: "Event") -> "Event":
        """Stamp pubkey, id and signature on ``event`` in place and return it."""
        event.pubkey = self.public_key
        event.id = event.compute_id()
        event.sig = self.sign_digest(bytes.fromhex(event.id))
        return event


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()
