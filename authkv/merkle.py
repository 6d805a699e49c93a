"""Merkle-mountain-range hashing and lookup paths over sorted entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from .common import Digest, hash_two_things, zero_digest

Entry = Tuple[str, str]


def empty_kv_hash() -> Digest:
    """Hash of an empty store or empty subtree."""
    return zero_digest()


def hash_kv(key: str, value: str) -> Digest:
    """Leaf hash of one entry."""
    return hash_two_things("hash_kv_K", "hash_kv_V", key, value)


def hash_branch(left: Digest, right: Digest) -> Digest:
    """Hash of an internal node."""
    return hash_two_things("hash_branch_L", "hash_branch_R", left, right)


def root_from_path(
    ix: int, siblings: Sequence[Digest], key: str, value: str
) -> Digest:
    """Root of a tree holding ``(key, value)`` at leaf ``ix`` with ``siblings``."""
    running = hash_kv(key, value)
    for sib in siblings:
        sib_is_right = ix % 2 == 0
        ix //= 2
        running = hash_branch(running, sib) if sib_is_right else hash_branch(sib, running)

    while ix > 0:
        sib_is_right = ix % 2 == 0
        ix //= 2
        if sib_is_right:
            running = hash_branch(running, empty_kv_hash())
        else:
            running = hash_branch(empty_kv_hash(), running)
    return running


def merkle_hash_arr(items: Iterable[Entry]) -> Digest:
    """Overall hash of a list of entries, as a Merkle mountain range.

    Peaks of complete subtrees are combined from the smallest upward,
    padding missing right halves with empty subtrees.
    """
    peaks: List[Optional[Digest]] = [None]
    for key, value in items:
        running = hash_kv(key, value)
        i = 0
        while peaks[i] is not None:
            running = hash_branch(peaks[i], running)
            peaks[i] = None
            if i + 1 == len(peaks):
                peaks.append(None)
            i += 1
        peaks[i] = running

    if len(peaks) > 1 and peaks[-1] is None:
        peaks.pop()

    acc: Optional[Digest] = None
    for peak in peaks[:-1]:
        if peak is not None:
            acc = hash_branch(peak, acc if acc is not None else empty_kv_hash())
        elif acc is not None:
            acc = hash_branch(acc, empty_kv_hash())

    top = peaks[-1] if peaks[-1] is not None else empty_kv_hash()
    return hash_branch(top, acc) if acc is not None else top


@dataclass
class MerkleLookupPath:
    """An entry and the sibling hashes from its leaf to the root."""

    key: str
    value: str
    siblings: List[Digest] = field(default_factory=list)

    def root_from_path(self, ix: int) -> Digest:
        """Root implied by this path if the entry sits at index ``ix``."""
        return root_from_path(ix, self.siblings, self.key, self.value)


def _sibling_hash(i: int, height: int, items: Sequence[Entry]) -> Digest:
    n = len(items)
    if (i >> height) & 1 == 0:
        lo = ((i >> height) + 1) << height
        hi = lo + (1 << height)
        if hi <= n:
            return merkle_hash_arr(items[lo:hi])
        if lo >= n:
            return empty_kv_hash()
        # The partial subtree must be padded up to the full sibling height.
        result = merkle_hash_arr(items[lo:])
        partial_height = (n - lo - 1).bit_length()
        for _ in range(partial_height, height):
            result = hash_branch(result, empty_kv_hash())
        return result
    hi = (i >> height) << height
    lo = hi - (1 << height)
    return merkle_hash_arr(items[lo:hi])


def prove_lookup(i: int, items: Sequence[Entry]) -> Optional[MerkleLookupPath]:
    """Authenticated lookup of ``items[i]``; None if ``i`` is out of range."""
    if not 0 <= i < len(items):
        return None
    key, value = items[i]
    siblings = []
    height = 0
    while (1 << height) < len(items):
        siblings.append(_sibling_hash(i, height, items))
        height += 1

    path = MerkleLookupPath(key, value, siblings)
    assert path.root_from_path(i) == merkle_hash_arr(items)
    return path