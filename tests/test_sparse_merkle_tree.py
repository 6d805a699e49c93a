from typing import Dict, List, Tuple

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from authkv.common import zero_digest
from authkv.sparse_merkle_tree import SparseMerkleTree, SparseMerkleTreeProof

KEY_CHOICES = ["", "a", "b", "c", "key1", "key2", "test", "0", "1"]


def run_against_dict(ops: List[Tuple]) -> None:
    smt = SparseMerkleTree()
    reference: Dict[str, str] = {}
    for op in ops:
        kind = op[0]
        if kind == "insert":
            _, key, value = op
            smt = smt.insert(key, value)
            reference[key] = value
        elif kind == "get":
            key = op[1]
            result, proof = smt.get(key)
            assert result == reference.get(key), key
            assert SparseMerkleTree.check_proof(key, result, proof, smt.commit()), key
        else:
            key = op[1]
            smt = smt.remove(key)
            reference.pop(key, None)


_key = st.sampled_from(KEY_CHOICES)
_op = st.one_of(
    st.tuples(st.just("insert"), _key, st.text(max_size=8)),
    st.tuples(st.just("get"), _key),
    st.tuples(st.just("remove"), _key),
)


@settings(max_examples=25, deadline=None)
@given(st.lists(_op, max_size=10))
def test_smt_vs_dict_property(ops):
    run_against_dict(ops)


def test_basic_operations():
    smt = SparseMerkleTree()
    empty_commit = smt.commit()
    result, proof = smt.get("nonexistent")
    assert result is None
    assert SparseMerkleTree.check_proof("nonexistent", None, proof, empty_commit)

    smt = smt.insert("key1", "value1")
    commit1 = smt.commit()
    result, proof = smt.get("key1")
    assert result == "value1"
    assert SparseMerkleTree.check_proof("key1", result, proof, commit1)

    result, proof = smt.get("key2")
    assert result is None
    assert SparseMerkleTree.check_proof("key2", None, proof, commit1)

    smt = smt.insert("key2", "value2").insert("key3", "value3")
    commit2 = smt.commit()
    for key, expected in [("key1", "value1"), ("key2", "value2"), ("key3", "value3")]:
        result, proof = smt.get(key)
        assert result == expected
        assert SparseMerkleTree.check_proof(key, result, proof, commit2)


def test_key_update():
    smt = SparseMerkleTree().insert("key", "value1")
    commit1 = smt.commit()
    smt = smt.insert("key", "value2")
    commit2 = smt.commit()
    assert commit1 != commit2
    result, proof = smt.get("key")
    assert result == "value2"
    assert SparseMerkleTree.check_proof("key", result, proof, commit2)


def test_removal():
    smt = SparseMerkleTree().insert("key1", "value1").insert("key2", "value2")
    commit_before = smt.commit()
    smt = smt.remove("key1")
    commit_after = smt.commit()
    assert commit_before != commit_after

    result, proof = smt.get("key1")
    assert result is None
    assert SparseMerkleTree.check_proof("key1", None, proof, commit_after)

    result, proof = smt.get("key2")
    assert result == "value2"
    assert SparseMerkleTree.check_proof("key2", result, proof, commit_after)


def test_remove_everything_restores_empty_commitment():
    empty = SparseMerkleTree()
    smt = empty.insert("a", "1").insert("b", "2").remove("a").remove("b")
    assert smt.commit() == empty.commit()


def test_commitment_determinism():
    smt1 = SparseMerkleTree().insert("a", "1").insert("b", "2").insert("c", "3")
    smt2 = SparseMerkleTree().insert("c", "3").insert("a", "1").insert("b", "2")
    assert smt1.commit() == smt2.commit()


def test_empty_tree_properties():
    smt = SparseMerkleTree()
    empty_commit = smt.commit()
    assert empty_commit == zero_digest()
    result, proof = smt.get("any_key")
    assert result is None
    assert len(proof.siblings) == 256
    assert all(sib == zero_digest() for sib in proof.siblings)
    assert SparseMerkleTree.check_proof("any_key", None, proof, empty_commit)


def test_single_key_commitment_is_not_empty():
    smt = SparseMerkleTree().insert("key", "value")
    assert smt.commit() != zero_digest()


def test_insert_does_not_change_original():
    base = SparseMerkleTree()
    base_commit = base.commit()
    updated = base.insert("key", "value")
    assert base.get("key")[0] is None
    assert base.commit() == base_commit
    assert updated.get("key")[0] == "value"


def test_proof_manipulation_fails():
    smt = SparseMerkleTree().insert("key", "value")
    commit = smt.commit()
    result, proof = smt.get("key")
    assert proof.siblings
    if proof.siblings[0] == zero_digest():
        proof.siblings[0] = SparseMerkleTree.leaf_hash("dummy", "dummy")
    else:
        proof.siblings[0] = zero_digest()
    assert not SparseMerkleTree.check_proof("key", result, proof, commit)


def test_wrong_commitment_fails():
    smt1 = SparseMerkleTree().insert("key", "value")
    smt2 = SparseMerkleTree().insert("key", "different_value")
    result, proof = smt1.get("key")
    assert not SparseMerkleTree.check_proof("key", result, proof, smt2.commit())


def test_non_membership_proofs():
    smt = SparseMerkleTree().insert("existing_key", "value")
    commit = smt.commit()
    result, proof = smt.get("non_existing_key")
    assert result is None
    assert SparseMerkleTree.check_proof("non_existing_key", None, proof, commit)
    assert not SparseMerkleTree.check_proof(
        "non_existing_key", "fake_value", proof, commit
    )


def test_claiming_absence_of_present_key_fails():
    smt = SparseMerkleTree().insert("key", "value")
    _, proof = smt.get("key")
    assert not SparseMerkleTree.check_proof("key", None, proof, smt.commit())


@pytest.mark.parametrize("length", [0, 1, 255, 257])
def test_wrong_proof_length_fails(length):
    proof = SparseMerkleTreeProof([zero_digest()] * length)
    assert not SparseMerkleTree.check_proof("k", None, proof, zero_digest())


@pytest.mark.parametrize(
    "ops",
    [
        [("insert", "", "empty_key"), ("get", ""), ("insert", "a", ""), ("get", "a")],
        [
            ("insert", "key", "value1"),
            ("insert", "key", "value2"),
            ("insert", "key", "value3"),
            ("get", "key"),
        ],
        [("remove", "non_existent"), ("get", "non_existent")],
    ],
)
def test_specific_edge_cases(ops):
    run_against_dict(ops)


def test_key_to_path_shape_and_determinism():
    path = SparseMerkleTree.key_to_path("key")
    assert len(path) == 256
    assert all(isinstance(bit, bool) for bit in path)
    assert SparseMerkleTree.key_to_path("key") == path
    assert SparseMerkleTree.key_to_path("other") != path


def test_leaf_and_branch_hashes_are_domain_separated():
    leaf = SparseMerkleTree.leaf_hash("a", "b")
    assert leaf == SparseMerkleTree.leaf_hash("a", "b")
    assert leaf != SparseMerkleTree.leaf_hash("b", "a")
    branch = SparseMerkleTree.branch_hash(zero_digest(), leaf)
    assert branch != SparseMerkleTree.branch_hash(leaf, zero_digest())
    assert branch != leaf