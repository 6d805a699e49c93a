"""Digest type and domain-separated SHA-256 helpers."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Union

DIGEST_SIZE = hashlib.sha256().digest_size

Hashable = Union[str, bytes, bytearray, memoryview, "Digest"]


@dataclass(frozen=True)
class Digest:
    """A SHA-256 output."""

    data: bytes

    def __post_init__(self) -> None:
        raw = bytes(self.data)
        if len(raw) != DIGEST_SIZE:
            raise ValueError(
                f"digest must be {DIGEST_SIZE} bytes, got {len(raw)}"
            )
        object.__setattr__(self, "data", raw)

    def __bytes__(self) -> bytes:
        return self.data

    def hex(self) -> str:
        """Return the digest as lower-case hexadecimal."""
        return self.data.hex()

    def __repr__(self) -> str:
        return f"sha256:{self.hex()}"


def zero_digest() -> Digest:
    """The all-zero digest, used to stand for empty subtrees."""
    return Digest(bytes(DIGEST_SIZE))


def _as_bytes(value: Hashable) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, Digest):
        return value.data
    return bytes(value)


def _update_labelled(hasher, label: str, value: Hashable) -> None:
    raw = _as_bytes(value)
    hasher.update(label.encode("utf-8"))
    hasher.update(len(raw).to_bytes(8, "little"))
    hasher.update(raw)


def hash_one_thing(label: str, value: Hashable) -> Digest:
    """Hash one labelled, length-prefixed value."""
    hasher = hashlib.sha256(b"hash_one_thing")
    _update_labelled(hasher, label, value)
    return Digest(hasher.digest())


def hash_two_things(
    label1: str, label2: str, value1: Hashable, value2: Hashable
) -> Digest:
    """Hash two labelled, length-prefixed values."""
    hasher = hashlib.sha256(b"hash_two_things")
    _update_labelled(hasher, label1, value1)
    _update_labelled(hasher, label2, value2)
    return Digest(hasher.digest())