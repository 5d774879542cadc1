"""
Decides what an incoming identifier string is, then decodes it.

An input can be one of three shapes, tried in this order:

1. a full public id (``usr_k5qx9zab``), recognised by the separator;
2. a raw UUID in canonical form, for UUID-keyed entities;
3. a bare encoded hash (``k5qx9zab``), falling back to the raw primary key
   (decimal digits, or 32 hex digits for UUIDs) when it does not decode.

A full public id whose prefix is not the entity's never resolves, even if its
hash would decode for some other entity. Bad input is a normal miss: every
user-input failure comes back as ``NotFound`` rather than an exception.
"""
import re
import uuid
from typing import Union

from pydantic import BaseModel, ConfigDict

import base62
import encoding
from config import Settings
from core_logic import FailureReason, IdentifierError, MalformedInput, Overflow, PrefixMismatch, get_logger
from models import Entity, KeyMode
from segments import decompose

logger = get_logger(__name__)

UUID_PATTERN = re.compile(
    r"\A[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\Z", re.IGNORECASE
)
UUID_HEX_PATTERN = re.compile(r"\A[0-9a-f]{32}\Z", re.IGNORECASE)
DIGITS_PATTERN = re.compile(r"\A[0-9]+\Z")

InternalKey = Union[int, uuid.UUID]

# --- RESOLUTION PLANS ---


class FullPublicId(BaseModel):
    model_config = ConfigDict(frozen=True)
    prefix_part: str
    hash_part: str


class BareEncodedKey(BaseModel):
    model_config = ConfigDict(frozen=True)
    value: str


class RawInternalKey(BaseModel):
    model_config = ConfigDict(frozen=True)
    value: str


ResolutionPlan = Union[FullPublicId, BareEncodedKey, RawInternalKey]


class NotFound(BaseModel):
    model_config = ConfigDict(frozen=True)
    reason: FailureReason
    detail: str = ""

    def __bool__(self) -> bool:
        return False


class Resolved(BaseModel):
    model_config = ConfigDict(frozen=True)
    key: InternalKey
    plan: ResolutionPlan


def _not_found(value: str, error: IdentifierError) -> NotFound:
    logger.debug(f"Unresolved identifier {value!r}: {error.reason.value} ({error.detail})")
    return NotFound(reason=error.reason, detail=error.detail)


def is_uuid_shape(value: str) -> bool:
    return bool(UUID_PATTERN.match(value))


# --- SHAPE CLASSIFICATION ---

def resolve(value: str, expected_prefix: str, separator: str,
            key_mode: KeyMode = KeyMode.INTEGER) -> Union[ResolutionPlan, NotFound]:
    """Classifies ``value`` without decoding anything."""
    if not value:
        return _not_found(value, MalformedInput("Identifier is empty"))

    if separator in value:
        try:
            prefix_part, hash_part = decompose(value, separator)
        except IdentifierError as e:
            return _not_found(value, e)
        if prefix_part != expected_prefix:
            return _not_found(value, PrefixMismatch(
                f"Prefix {prefix_part!r} does not match {expected_prefix!r}"
            ))
        return FullPublicId(prefix_part=prefix_part, hash_part=hash_part)

    if key_mode == KeyMode.UUID and is_uuid_shape(value):
        return RawInternalKey(value=value)

    return BareEncodedKey(value=value)


# --- CODEC BRIDGE ---

def hashid_params(entity: Entity, settings: Settings) -> dict:
    salt = entity.salt if entity.salt is not None else settings.salt
    min_length = entity.min_length if entity.min_length is not None else settings.hashid_min_length
    return {
        "salt": salt,
        "min_length": min_length,
        "alphabet": settings.hashid_alphabet,
        "max_value": settings.max_integer_key,
    }


def encode_key(key: InternalKey, entity: Entity, settings: Settings) -> str:
    """Encodes an internal key to the bare hash. Raises ValueError for an invalid key."""
    if entity.key_mode == KeyMode.UUID:
        return base62.encode_uuid(key, settings.base62_alphabet)
    return encoding.encode_id(key, **hashid_params(entity, settings))


def decode_key(encoded: str, entity: Entity, settings: Settings) -> InternalKey:
    """Strict decode of a bare hash. Raises IdentifierError subclasses."""
    if entity.key_mode == KeyMode.UUID:
        return uuid.UUID(base62.decode_uuid(encoded, settings.base62_alphabet))
    return encoding.decode_strict(encoded, **hashid_params(entity, settings))


def parse_raw_key(value: str, entity: Entity, settings: Settings) -> InternalKey:
    """Interprets ``value`` as the primary key itself. Raises IdentifierError subclasses."""
    if entity.key_mode == KeyMode.UUID:
        if is_uuid_shape(value) or UUID_HEX_PATTERN.match(value):
            return uuid.UUID(value)
        raise MalformedInput("Not a UUID")

    if not DIGITS_PATTERN.match(value):
        raise MalformedInput("Not a base-10 integer")
    n = int(value)
    if n > settings.max_integer_key:
        raise Overflow("Integer key exceeds the configured width")
    return n


# --- EXECUTION ---

def resolve_key(value: str, entity: Entity, settings: Settings) -> Union[Resolved, NotFound]:
    """Runs the whole resolution for one entity: classify, decode, fall back."""
    if value is None:
        return _not_found(value, MalformedInput("Identifier is empty"))
    if not isinstance(value, str):
        # An already typed key (42, UUID(...)) is the raw key, never a hash
        if isinstance(value, (int, uuid.UUID)) and not isinstance(value, bool):
            try:
                return Resolved(key=parse_raw_key(str(value), entity, settings),
                                plan=RawInternalKey(value=str(value)))
            except IdentifierError as e:
                return _not_found(str(value), e)
        return _not_found(repr(value), MalformedInput(f"Unsupported identifier type {type(value).__name__}"))

    plan = resolve(value, entity.prefix(settings.separator), settings.separator, entity.key_mode)
    if isinstance(plan, NotFound):
        return plan

    if isinstance(plan, FullPublicId):
        try:
            return Resolved(key=decode_key(plan.hash_part, entity, settings), plan=plan)
        except IdentifierError as e:
            return _not_found(value, e)

    if isinstance(plan, RawInternalKey):
        try:
            return Resolved(key=parse_raw_key(plan.value, entity, settings), plan=plan)
        except IdentifierError as e:
            return _not_found(value, e)

    # Decode first; the raw key is only a fallback
    try:
        return Resolved(key=decode_key(plan.value, entity, settings), plan=plan)
    except IdentifierError as decode_error:
        if not entity.allow_raw_keys:
            return _not_found(value, decode_error)
        try:
            key = parse_raw_key(plan.value, entity, settings)
        except IdentifierError as raw_error:
            # Overflow on a numeric string says more than "did not decode"
            error = raw_error if isinstance(raw_error, Overflow) else decode_error
            return _not_found(value, error)
        logger.debug(f"Identifier {value!r} resolved as a raw {entity.key_mode.value} key")
        return Resolved(key=key, plan=RawInternalKey(value=plan.value))
