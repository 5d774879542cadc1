import pytest

from core_logic import MalformedInput
from segments import compose, decompose, join_segments


def test_compose_and_decompose():
    public_id = compose(["a", "b"], "xyz", "_")
    assert public_id == "a_b_xyz"
    assert decompose(public_id, "_") == ("a_b", "xyz")


def test_single_segment():
    assert compose(["usr"], "k5qx9zab", "_") == "usr_k5qx9zab"
    assert decompose("usr_k5qx9zab", "_") == ("usr", "k5qx9zab")


def test_hash_is_always_the_last_piece():
    assert decompose("int_tool_phn_k5qx9zab", "_") == ("int_tool_phn", "k5qx9zab")


def test_multi_character_separator():
    public_id = compose(["int", "tool"], "abc", "--")
    assert public_id == "int--tool--abc"
    assert decompose(public_id, "--") == ("int--tool", "abc")


def test_join_segments():
    assert join_segments(("int", "tool", "phn"), "_") == "int_tool_phn"


@pytest.mark.parametrize("value", ["", "noseparator", "usr_", "a__", "_"])
def test_decompose_rejects_malformed(value):
    with pytest.raises(MalformedInput):
        decompose(value, "_")


def test_empty_prefix_is_returned_as_is():
    """Prefix validation belongs to the dispatcher, not to splitting."""
    assert decompose("_abc", "_") == ("", "abc")
