"""
Joining prefix segments with an encoded hash, and splitting them apart again.

The hash is always the last separator-delimited piece: prefixes can be
compositional ("int_tool_phn"), so only the final piece is known to be the hash.
"""
from typing import Iterable, Tuple

from core_logic import MalformedInput


def join_segments(segments: Iterable[str], separator: str) -> str:
    return separator.join(segments)


def compose(segments: Iterable[str], encoded_hash: str, separator: str) -> str:
    """compose(["a", "b"], "xyz", "_") -> "a_b_xyz" """
    return separator.join([*segments, encoded_hash])


def decompose(public_id: str, separator: str) -> Tuple[str, str]:
    """
    Splits a public id into (prefix, encoded_hash).

    Raises MalformedInput when there is no separator or the hash piece is empty.
    """
    if not public_id:
        raise MalformedInput("Public id is empty")
    parts = public_id.split(separator)
    if len(parts) < 2:
        raise MalformedInput(f"Public id has no {separator!r} separator")
    encoded_hash = parts.pop()
    if not encoded_hash:
        raise MalformedInput("Public id has an empty hash segment")
    return separator.join(parts), encoded_hash
