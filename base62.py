"""
Base62 conversion between 128-bit UUIDs and short strings.

UUIDs are already random, so there is nothing to hide here: the encoding only
shortens the 36-character canonical form to at most 22 characters and back.
"""
import uuid
from functools import lru_cache
from typing import Optional, Union

from config import DEFAULT_BASE62_ALPHABET
from core_logic import InvalidCharacter, MalformedInput, Overflow

UUID_BITS = 128
MAX_UUID_INT = 2 ** UUID_BITS - 1
# 62 ** 22 > 2 ** 128 > 62 ** 21
MAX_UUID_DIGITS = 22


@lru_cache(maxsize=16)
def get_index(alphabet: str) -> dict:
    """Character to digit value, built once per alphabet."""
    return {char: i for i, char in enumerate(alphabet)}


def encode(n: int, alphabet: str = DEFAULT_BASE62_ALPHABET) -> str:
    """
    Converts a non-negative integer into a base62 string, most significant digit first.
    Zero is the first alphabet character, never the empty string.
    """
    if n < 0:
        raise ValueError("Input must be a non-negative integer")
    base = len(alphabet)
    if n == 0:
        return alphabet[0]
    result = []
    while n > 0:
        n, remainder = divmod(n, base)
        result.append(alphabet[remainder])
    return "".join(reversed(result))


def decode(s: str, alphabet: str = DEFAULT_BASE62_ALPHABET, max_bits: int = UUID_BITS) -> int:
    """
    Converts a base62 string back to an integer.

    Only the canonical spelling decodes: a leading zero digit is rejected, so
    every value has exactly one encoding.

    Raises MalformedInput for the empty string or a zero-padded value,
    InvalidCharacter for symbols outside the alphabet and Overflow once the
    value needs more than max_bits.
    """
    if not s:
        raise MalformedInput("Encoded value is empty")
    if len(s) > 1 and s[0] == alphabet[0]:
        raise MalformedInput("Encoded value has leading zero digits")
    base = len(alphabet)
    index = get_index(alphabet)
    n = 0
    for char in s:
        digit = index.get(char)
        if digit is None:
            raise InvalidCharacter(f"Invalid character {char!r} in encoded value")
        n = n * base + digit
        if n >> max_bits:
            raise Overflow(f"Encoded value exceeds {max_bits} bits")
    return n


def format_uuid(n: int) -> str:
    """Renders a 128-bit integer in the canonical 8-4-4-4-12 layout, keeping leading zeros."""
    if not 0 <= n <= MAX_UUID_INT:
        raise Overflow("Value does not fit in 128 bits")
    hex_str = format(n, "032x")
    return f"{hex_str[0:8]}-{hex_str[8:12]}-{hex_str[12:16]}-{hex_str[16:20]}-{hex_str[20:32]}"


def encode_uuid(value: Union[uuid.UUID, str], alphabet: str = DEFAULT_BASE62_ALPHABET) -> str:
    """Encodes a UUID (object or hex string, hyphens optional) to base62."""
    if isinstance(value, uuid.UUID):
        n = value.int
    else:
        # raises ValueError for anything that is not a UUID
        n = uuid.UUID(str(value)).int
    return encode(n, alphabet)


def decode_uuid(encoded: str, alphabet: str = DEFAULT_BASE62_ALPHABET) -> str:
    """Strict decode to the canonical UUID string. Raises IdentifierError subclasses."""
    if len(encoded) > MAX_UUID_DIGITS:
        raise Overflow(f"Encoded UUID is longer than {MAX_UUID_DIGITS} digits")
    return format_uuid(decode(encoded, alphabet, UUID_BITS))


def decode_to_uuid(encoded: str, alphabet: str = DEFAULT_BASE62_ALPHABET) -> Optional[str]:
    """Decodes a base62 string to a canonical UUID string, or None if it is not one."""
    try:
        return decode_uuid(encoded, alphabet)
    except ValueError:
        return None
