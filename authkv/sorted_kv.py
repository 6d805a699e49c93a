"""An authenticated key-value store kept as a sorted list of entries."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from .common import Digest
from .kv import AuthenticatedKV
from .merkle import (
    Entry,
    MerkleLookupPath,
    empty_kv_hash,
    merkle_hash_arr,
    prove_lookup,
    root_from_path,
)


@dataclass(frozen=True)
class NotPresent:
    """Proof that a key has no entry.

    ``prev`` is the entry at ``next_ix - 1`` (None exactly when
    ``next_ix == 0``) and ``next`` the entry at ``next_ix`` (None exactly
    when ``next_ix`` is the length of the store).
    """

    next_ix: int
    prev: Optional[MerkleLookupPath]
    next: Optional[MerkleLookupPath]


@dataclass(frozen=True)
class Present:
    """Proof that a key maps to a value stored at index ``ix``.

    ``prev`` is the entry at ``ix - 1`` (None exactly when ``ix == 0``)
    and ``next`` the entry at ``ix + 1`` (None exactly when ``ix`` is the
    last index).
    """

    ix: int
    path_siblings: List[Digest]
    prev: Optional[MerkleLookupPath]
    next: Optional[MerkleLookupPath]


LookupProof = Union[Present, NotPresent]


def _is_rightmost(ix: int, siblings: Sequence[Digest]) -> bool:
    """True if every right-hand sibling on the path is an empty subtree."""
    for sib in siblings:
        sib_is_right = ix % 2 == 0
        ix //= 2
        if sib_is_right and sib != empty_kv_hash():
            return False
    return ix == 0


class SortedKV(AuthenticatedKV):
    """Entries sorted by key, committed to as a binary Merkle tree.

    Repeated keys may be stored; a lookup selects the last entry with
    that key, which is also the most recently inserted one.
    """

    def __init__(self, entries: Sequence[Entry] = ()) -> None:
        store = tuple((str(k), str(v)) for k, v in entries)
        if any(a[0] > b[0] for a, b in zip(store, store[1:])):
            raise ValueError("entries must be sorted by key")
        self._store: Tuple[Entry, ...] = store
        self._commitment = merkle_hash_arr(store)

    def __repr__(self) -> str:
        return f"SortedKV({list(self._store)!r})"

    def items(self) -> Tuple[Entry, ...]:
        """The stored entries, in order."""
        return self._store

    def _search(self, key: str) -> int:
        # Rightmost index whose key is <= ``key``; 0 if there is none.
        return max(bisect_right(self._store, key, key=lambda e: e[0]) - 1, 0)

    def commit(self) -> Digest:
        return self._commitment

    @staticmethod
    def check_proof(
        key: str,
        result: Optional[str],
        proof: LookupProof,
        commitment: Digest,
    ) -> bool:
        if result is not None and isinstance(proof, Present):
            return _check_present(key, result, proof, commitment)
        if result is None and isinstance(proof, NotPresent):
            return _check_not_present(key, proof, commitment)
        return False

    def get(self, key: str) -> Tuple[Optional[str], LookupProof]:
        store = self._store
        if not store:
            return None, NotPresent(0, None, None)

        ix = self._search(key)
        prev = prove_lookup(ix - 1, store) if ix > 0 else None
        nxt = prove_lookup(ix + 1, store)
        here = prove_lookup(ix, store)
        assert here is not None

        if here.key == key:
            return here.value, Present(ix, here.siblings, prev, nxt)
        if here.key < key:
            return None, NotPresent(ix + 1, here, nxt)
        return None, NotPresent(ix, prev, here)

    def insert(self, key: str, value: str) -> "SortedKV":
        store = list(self._store)
        pos = bisect_right(store, key, key=lambda e: e[0])
        store.insert(pos, (key, value))
        return SortedKV(store)

    def remove(self, key: str) -> "SortedKV":
        store = list(self._store)
        if store:
            ix = self._search(key)
            if store[ix][0] == key:
                del store[ix]
        return SortedKV(store)


def _check_present(
    key: str, value: str, proof: Present, commitment: Digest
) -> bool:
    ix = proof.ix
    if root_from_path(ix, proof.path_siblings, key, value) != commitment:
        return False

    if ix == 0:
        if proof.prev is not None:
            return False
    else:
        prev = proof.prev
        if prev is None or prev.key > key:
            return False
        if prev.root_from_path(ix - 1) != commitment:
            return False

    nxt = proof.next
    if nxt is None:
        return _is_rightmost(ix, proof.path_siblings)
    if nxt.key <= key:
        return False
    return nxt.root_from_path(ix + 1) == commitment


def _check_not_present(key: str, proof: NotPresent, commitment: Digest) -> bool:
    next_ix = proof.next_ix
    prev = proof.prev

    if prev is None:
        if next_ix != 0:
            return False
    else:
        if next_ix == 0 or prev.key >= key:
            return False
        if prev.root_from_path(next_ix - 1) != commitment:
            return False

    nxt = proof.next
    if nxt is None:
        if prev is None:
            return commitment == empty_kv_hash()
        return _is_rightmost(next_ix - 1, prev.siblings)
    if nxt.key <= key:
        return False
    return nxt.root_from_path(next_ix) == commitment