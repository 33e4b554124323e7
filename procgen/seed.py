from __future__ import annotations

"""
Deterministic, derivable seeds.

A ``Seed`` is the root of all pseudo-randomness in the generator. It carries an
opaque 64-bit hash plus a continuous ``skew`` value (usually simulated time)
which noise layers may read to drift smoothly. Seeds are never mutated; every
consumer derives its own children with ``Seed.derive``.
"""

import hashlib
import struct
from dataclasses import dataclass, replace
from typing import Any

from .errors import InvalidInputError

MASK_64 = 0xFFFFFFFFFFFFFFFF

# Type tags keep 1, "1", 1.0 and (1,) apart.
_TAG_INT = 0x01
_TAG_STR = 0x02
_TAG_BYTES = 0x03
_TAG_FLOAT = 0x04
_TAG_SEQ = 0x05
_TAG_BOOL = 0x06
_TAG_NONE = 0x07


# ─────────────────────────────────────────────────────────────────────────────
# == STABLE HASH HELPERS ==

def _stable_hash(*args: int) -> int:
    """
    Combine integer arguments into a single 64-bit integer using a deterministic mixing routine.
    Ensures repeatable results across Python runs (unlike built-in hash()).
    """
    x = 0x345678ABCDEF1234
    for a in args:
        a &= MASK_64
        a ^= (a >> 33)
        a = (a * 0xFF51AFD7ED558CCD) & MASK_64
        a ^= (a >> 33)
        x ^= a
        x = (x * 0xC4CEB9FE1A85EC53) & MASK_64
    return x


def _digest64(data: bytes) -> int:
    return int.from_bytes(hashlib.blake2b(data, digest_size=8).digest(), "little")


def stable_hash(value: Any) -> int:
    """
    Hash ``value`` to an unsigned 64-bit integer, identically in every process.

    Supported: ints, bools, floats, str, bytes, None and (nested) tuples/lists of
    those. Sequences are order-sensitive.
    """
    if isinstance(value, bool):
        return _stable_hash(_TAG_BOOL, int(value))
    if isinstance(value, int):
        # Python ints are unbounded; fold high words so large values stay distinct.
        words = [value & MASK_64]
        rest = value >> 64
        while rest not in (0, -1):
            words.append(rest & MASK_64)
            rest >>= 64
        return _stable_hash(_TAG_INT, *words, 1 if value < 0 else 0)
    if isinstance(value, float):
        (bits,) = struct.unpack("<Q", struct.pack("<d", value))
        return _stable_hash(_TAG_FLOAT, bits)
    if isinstance(value, str):
        return _stable_hash(_TAG_STR, _digest64(value.encode("utf-8")))
    if isinstance(value, (bytes, bytearray)):
        return _stable_hash(_TAG_BYTES, _digest64(bytes(value)))
    if isinstance(value, (tuple, list)):
        return _stable_hash(_TAG_SEQ, len(value), *(stable_hash(v) for v in value))
    if value is None:
        return _stable_hash(_TAG_NONE)
    raise InvalidInputError(f"Cannot derive a seed from value of type {type(value).__name__}")


# ─────────────────────────────────────────────────────────────────────────────
# == SEED VALUE TYPE ==

@dataclass(frozen=True)
class Seed:
    """
    Immutable 64-bit seed with a continuous skew parameter.

    Attributes:
      hash: Opaque deterministic fingerprint in [0, 2**64).
      skew: Continuous scalar threaded unchanged through derivation.
    """

    hash: int
    skew: float = 0.0

    @classmethod
    def new(cls, value: Any, skew: float = 0.0) -> "Seed":
        """Hash ``value`` into a fresh root seed."""
        return cls(stable_hash(value), float(skew))

    def derive(self, label: Any) -> "Seed":
        """
        Return a child seed for ``label``. Distinct labels on the same parent give
        independent-looking children; the same label always gives the same child.
        """
        return Seed.new(self.hash ^ stable_hash(label), self.skew)

    def fraction(self) -> float:
        """Map the hash to a uniform float in [0, 1]."""
        return self.hash / MASK_64

    def with_skew(self, skew: float) -> "Seed":
        return replace(self, skew=float(skew))

    def advance(self, delta: float) -> "Seed":
        """Copy of this seed with the skew moved forward by ``delta``."""
        return self.with_skew(self.skew + delta)

    def __repr__(self) -> str:
        return f"Seed(hash=0x{self.hash:016x}, skew={self.skew})"


__all__ = ["MASK_64", "Seed", "stable_hash"]
