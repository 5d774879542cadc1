"""
Handles the encoding and decoding of integer primary keys into short, non-sequential,
and reversible strings using the hashids library. This is the protection
against enumeration of sequential database ids; it is not encryption.
"""
from typing import Optional
from functools import lru_cache

from hashids import Hashids

from config import DEFAULT_HASHID_ALPHABET, DEFAULT_HASHID_MIN_LENGTH
from core_logic import InvalidCharacter, MalformedInput, Overflow

MAX_INT64 = 2 ** 64 - 1


@lru_cache(maxsize=256)
def get_hashids(salt: str = "", min_length: int = DEFAULT_HASHID_MIN_LENGTH,
                alphabet: str = DEFAULT_HASHID_ALPHABET) -> Hashids:
    """
    Returns a cached Hashids instance per (salt, min_length, alphabet).
    Entities with their own salt or length get their own instance, built once.
    """
    return Hashids(salt=salt, min_length=min_length, alphabet=alphabet)


def encode_id(n: int, salt: str = "", min_length: int = DEFAULT_HASHID_MIN_LENGTH,
              alphabet: str = DEFAULT_HASHID_ALPHABET, max_value: int = MAX_INT64) -> str:
    """Encodes a single non-negative integer id into a short, non-sequential string."""
    if isinstance(n, bool) or not isinstance(n, int):
        raise ValueError(f"Integer key expected, got {type(n).__name__}")
    if not 0 <= n <= max_value:
        raise ValueError("Input id is out of the encodable range.")
    return get_hashids(salt, min_length, alphabet).encode(n)


def decode_strict(s: str, salt: str = "", min_length: int = DEFAULT_HASHID_MIN_LENGTH,
                  alphabet: str = DEFAULT_HASHID_ALPHABET, max_value: int = MAX_INT64) -> int:
    """
    Decodes a short string back into an integer id.

    hashids only accepts a string that re-encodes to itself, so a hash produced
    under a different salt or min_length normally fails here rather than
    yielding some other id.
    """
    if not s:
        raise MalformedInput("Encoded value is empty")
    for char in s:
        if char not in alphabet:
            raise InvalidCharacter(f"Invalid character {char!r} in encoded value")

    decoded_tuple = get_hashids(salt, min_length, alphabet).decode(s)
    if len(decoded_tuple) != 1:
        # () when verification fails; several numbers never come from encode_id
        raise MalformedInput("Encoded value does not decode to a single id")

    n = decoded_tuple[0]
    if n > max_value:
        raise Overflow("Decoded id exceeds the integer key range")
    return n


def decode_id(s: str, salt: str = "", min_length: int = DEFAULT_HASHID_MIN_LENGTH,
              alphabet: str = DEFAULT_HASHID_ALPHABET, max_value: int = MAX_INT64) -> Optional[int]:
    """Decodes a short string back into an integer id, or None."""
    try:
        return decode_strict(s, salt, min_length, alphabet, max_value)
    except ValueError:
        return None
