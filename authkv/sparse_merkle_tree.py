"""An authenticated key-value store kept as a sparse Merkle tree of depth 256."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .common import Digest, hash_one_thing, hash_two_things, zero_digest
from .kv import AuthenticatedKV

TREE_DEPTH = 256

Path = Tuple[bool, ...]


@dataclass
class SparseMerkleTreeProof:
    """Sibling hashes from the leaf up to the root (leaf-level first)."""

    siblings: List[Digest] = field(default_factory=list)


class SparseMerkleTree(AuthenticatedKV):
    """Keys are placed at the leaf named by the bits of their hash.

    Empty subtrees hash to the zero digest, and a branch whose children
    are both empty is itself empty.
    """

    def __init__(self) -> None:
        self._leaves: Dict[str, str] = {}
        self._path_to_key: Dict[Path, str] = {}
        self._cache: Dict[Path, Digest] = {}

    def __repr__(self) -> str:
        return f"SparseMerkleTree({dict(sorted(self._leaves.items()))!r})"

    @classmethod
    def _from_maps(
        cls, leaves: Dict[str, str], path_to_key: Dict[Path, str]
    ) -> "SparseMerkleTree":
        tree = cls()
        tree._leaves = leaves
        tree._path_to_key = path_to_key
        return tree

    @staticmethod
    def key_to_path(key: str) -> Path:
        """The leaf position of ``key``: the bits of its hash, most significant first."""
        digest = hash_one_thing("smt_key", key)
        return tuple(
            bool((byte >> shift) & 1)
            for byte in digest.data
            for shift in range(7, -1, -1)
        )[:TREE_DEPTH]

    @staticmethod
    def leaf_hash(key: str, value: str) -> Digest:
        """Hash of a leaf holding ``(key, value)``."""
        return hash_two_things("smt_leaf_key", "smt_leaf_value", key, value)

    @staticmethod
    def branch_hash(left: Digest, right: Digest) -> Digest:
        """Hash of an internal node."""
        return hash_two_things("smt_branch_left", "smt_branch_right", left, right)

    def _hash_at(self, path: Path) -> Digest:
        cached = self._cache.get(path)
        if cached is not None:
            return cached

        if len(path) == TREE_DEPTH:
            key = self._path_to_key.get(path)
            if key is not None and key in self._leaves:
                result = self.leaf_hash(key, self._leaves[key])
            else:
                result = zero_digest()
        elif not self._leaves:
            result = zero_digest()
        else:
            depth = len(path)
            occupied = any(
                len(key_path) > depth and key_path[:depth] == path
                for key_path in self._path_to_key
            )
            if not occupied:
                result = zero_digest()
            else:
                left = self._hash_at(path + (False,))
                right = self._hash_at(path + (True,))
                if left == zero_digest() and right == zero_digest():
                    result = zero_digest()
                else:
                    result = self.branch_hash(left, right)

        self._cache[path] = result
        return result

    def commit(self) -> Digest:
        return self._hash_at(())

    def insert(self, key: str, value: str) -> "SparseMerkleTree":
        leaves = dict(self._leaves)
        path_to_key = dict(self._path_to_key)
        leaves[key] = value
        path_to_key[self.key_to_path(key)] = key
        return self._from_maps(leaves, path_to_key)

    def remove(self, key: str) -> "SparseMerkleTree":
        leaves = dict(self._leaves)
        path_to_key = dict(self._path_to_key)
        leaves.pop(key, None)
        path_to_key.pop(self.key_to_path(key), None)
        return self._from_maps(leaves, path_to_key)

    def get(self, key: str) -> Tuple[Optional[str], SparseMerkleTreeProof]:
        path = self.key_to_path(key)
        siblings = [
            self._hash_at(path[:depth] + (not path[depth],))
            for depth in range(TREE_DEPTH)
        ]
        siblings.reverse()
        return self._leaves.get(key), SparseMerkleTreeProof(siblings)

    @staticmethod
    def check_proof(
        key: str,
        result: Optional[str],
        proof: SparseMerkleTreeProof,
        commitment: Digest,
    ) -> bool:
        if len(proof.siblings) != TREE_DEPTH:
            return False

        path = SparseMerkleTree.key_to_path(key)
        zero = zero_digest()
        current = (
            SparseMerkleTree.leaf_hash(key, result) if result is not None else zero
        )
        for depth, sibling in enumerate(proof.siblings):
            if current == zero and sibling == zero:
                current = zero
            elif path[TREE_DEPTH - 1 - depth]:
                current = SparseMerkleTree.branch_hash(sibling, current)
            else:
                current = SparseMerkleTree.branch_hash(current, sibling)
        return current == commitment