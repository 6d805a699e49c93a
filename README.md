# authkv

Authenticated key-value stores. Each store publishes a short commitment (a
SHA-256 digest) to its whole contents, and every lookup comes with a proof
that anyone holding the commitment can check without seeing the store.

Two stores are provided, both implementing the abstract base class
`authkv.kv.AuthenticatedKV` (`commit`, `get`, `insert`, `remove` and the
static method `check_proof`, which returns `True` or `False`):

- `authkv.sorted_kv.SortedKV`: entries kept sorted by key, committed to with a
  Merkle mountain range. Lookups return either a `Present` proof (the entry's
  index, its sibling hashes and the neighbouring entries) or a `NotPresent`
  proof (the two entries that bracket the missing key). A `SortedKV` can be
  built empty or from a list of `(key, value)` pairs already sorted by key;
  unsorted input raises `ValueError`. `items()` returns the stored entries.
- `authkv.sparse_merkle_tree.SparseMerkleTree`: a 256-level sparse Merkle
  tree where each key's leaf is fixed by the bits of a hash of the key
  (`SparseMerkleTree.key_to_path`). Proofs are `SparseMerkleTreeProof`
  objects holding 256 sibling hashes, leaf level first.

Both stores are persistent in use: `insert` and `remove` return a new store
and leave the old one unchanged.

### Repeated keys in `SortedKV`

`SortedKV.insert` does not replace an existing entry: it adds the new entry
after any entries with the same key. `get` returns the last of them (the most
recently inserted value), and `remove` deletes only that last entry, so an
older value for the same key may become visible again. `SparseMerkleTree`
keeps one value per key, and `insert` overwrites it.

## Installation

```
pip install .
```

## Usage

```python
from authkv.sorted_kv import SortedKV

kv = SortedKV()
kv = kv.insert("alice", "1")
kv = kv.insert("bob", "2")

commitment = kv.commit()
value, proof = kv.get("alice")
assert value == "1"
assert SortedKV.check_proof("alice", value, proof, commitment)

value, proof = kv.get("carol")
assert value is None
assert SortedKV.check_proof("carol", None, proof, commitment)

# A proof does not vouch for a different answer.
assert not SortedKV.check_proof("carol", "forged", proof, commitment)
```

The sparse Merkle tree works the same way:

```python
from authkv.sparse_merkle_tree import SparseMerkleTree

tree = SparseMerkleTree().insert("key1", "value1")
value, proof = tree.get("key1")
assert SparseMerkleTree.check_proof("key1", value, proof, tree.commit())
```

## Hashing primitives

`authkv.common` holds the `Digest` type (a frozen wrapper around 32 bytes,
with `.data`, `.hex()` and `bytes(digest)`), `zero_digest()`, and the
domain-separated `hash_one_thing` and `hash_two_things` helpers, which accept
`str` (hashed as UTF-8), bytes-like values or `Digest`s.

`authkv.merkle` holds the Merkle helpers behind `SortedKV`: `hash_kv`,
`hash_branch`, `empty_kv_hash`, `merkle_hash_arr`, `prove_lookup`,
`root_from_path` and `MerkleLookupPath`.

## What it does not do

The stores live in memory only: there is no saving to or loading from disk,
no serialisation format for commitments or proofs, no network service and
no command-line tool. Keys and values are strings.

## Running the tests

```
pip install ".[test]"
pytest
```