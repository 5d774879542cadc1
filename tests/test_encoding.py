import pytest

from core_logic import InvalidCharacter, MalformedInput, Overflow
from encoding import MAX_INT64, decode_id, decode_strict, encode_id, get_hashids

SALT = "first-salt"
OTHER_SALT = "second-salt"


def test_hashids_reversibility():
    """Tests that hashids encoding and decoding is perfectly reversible."""
    for n in [0, 1, 2, 42, 12345, 2 ** 31 - 1, 2 ** 53, MAX_INT64]:
        encoded = encode_id(n, SALT)
        assert decode_id(encoded, SALT) == n


def test_encoding_is_deterministic():
    assert encode_id(987, SALT) == encode_id(987, SALT)


def test_zero_is_not_empty():
    assert encode_id(0, SALT)
    assert encode_id(0, SALT, min_length=0)


def test_sequential_ids_do_not_look_sequential():
    codes = [encode_id(n, SALT) for n in range(1, 50)]
    assert len(set(codes)) == len(codes)
    assert codes != sorted(codes)


def test_salt_sensitivity():
    for n in range(1, 20):
        assert encode_id(n, SALT) != encode_id(n, OTHER_SALT)


def test_wrong_salt_does_not_return_the_original():
    encoded = encode_id(12345, SALT)
    assert decode_id(encoded, OTHER_SALT) != 12345


@pytest.mark.parametrize("min_length", [0, 1, 8, 12, 20])
def test_minimum_length(min_length):
    for n in [0, 1, 99, 123456789, MAX_INT64]:
        assert len(encode_id(n, SALT, min_length=min_length)) >= min_length


def test_min_length_must_match_on_decode():
    """The padding is part of the hash; a different min_length does not verify."""
    encoded = encode_id(7, SALT, min_length=12)
    assert decode_id(encoded, SALT, min_length=12) == 7
    assert decode_id(encoded, SALT, min_length=8) is None


def test_output_stays_in_alphabet():
    alphabet = "abcdefghijklmnopqrstuvwxyz0123456789"
    for n in range(0, 200, 7):
        assert set(encode_id(n, SALT)) <= set(alphabet)


def test_encode_rejects_invalid_keys():
    with pytest.raises(ValueError):
        encode_id(-1, SALT)
    with pytest.raises(ValueError):
        encode_id(MAX_INT64 + 1, SALT)
    with pytest.raises(ValueError):
        encode_id("12", SALT)
    with pytest.raises(ValueError):
        encode_id(True, SALT)


def test_decode_rejects_bad_input():
    with pytest.raises(MalformedInput):
        decode_strict("", SALT)
    with pytest.raises(InvalidCharacter):
        decode_strict("!!!", SALT)
    with pytest.raises(InvalidCharacter):
        decode_strict("ABCDEFGH", SALT)
    assert decode_id("", SALT) is None
    assert decode_id("!!!", SALT) is None


def test_decode_rejects_unverified_hash():
    """A short string in the alphabet that encode_id would never produce."""
    with pytest.raises(MalformedInput):
        decode_strict("42", SALT)


def test_decode_overflow():
    too_big = get_hashids(SALT, 8).encode(MAX_INT64 + 1)
    with pytest.raises(Overflow):
        decode_strict(too_big, SALT)
    assert decode_id(too_big, SALT, max_value=MAX_INT64 + 1) == MAX_INT64 + 1


def test_get_hashids_is_cached_per_parameters():
    assert get_hashids(SALT, 8) is get_hashids(SALT, 8)
    assert get_hashids(SALT, 8) is not get_hashids(OTHER_SALT, 8)
