"""Authenticated key-value stores with Merkle commitments and lookup proofs."""

__version__ = "0.1.0"
__all__ = ["common", "kv", "merkle", "sorted_kv", "sparse_merkle_tree"]