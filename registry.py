"""
Entity registration and the lookup surface used by record-access code.

Usage:
    registry = Registry(Settings(hashid_salt="s3cret"))
    registry.register("User", prefix="usr")
    registry.register("Org", key_mode=KeyMode.UUID, prefix="org")
    registry.register("PhoneNumber", segments=["int", "tool", "phn"])

    registry.to_public_id("User", 1)          # "usr_<hash>"
    registry.lookup_any("User", "usr_<hash>")  # 1
    registry.lookup_any("User", "42")          # 42 (raw key fallback)

Register everything at startup. After that the registry is only read, so
lookups need no locking.
"""
from typing import Dict, Iterable, Optional, Union

from config import Settings, get_settings
from core_logic import ConfigurationError, IdentifierError, get_logger
from dispatcher import (
    FullPublicId, InternalKey, NotFound, Resolved,
    decode_key, encode_key, resolve, resolve_key,
)
from models import Entity, EntityConfig, IntegerKeyed, KeyMode, UuidKeyed
from segments import compose

logger = get_logger(__name__)

EntityRef = Union[str, EntityConfig]


class Registry:
    """Entity types by name, plus the settings every codec call uses."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings if settings is not None else get_settings()
        self._entities: Dict[str, Entity] = {}

    # --- REGISTRATION ---

    def register(
        self,
        name: str,
        key_mode: KeyMode = KeyMode.INTEGER,
        prefix: Optional[str] = None,
        segments: Optional[Iterable[str]] = None,
        salt: Optional[str] = None,
        min_length: Optional[int] = None,
        use_prefix_in_routes: Optional[bool] = None,
        allow_raw_keys: bool = True,
    ) -> Entity:
        """Registers an entity type with either a single prefix or a list of segments."""
        if prefix is not None and segments is not None:
            raise ConfigurationError(f"{name}: pass either prefix or segments, not both")

        parts = (prefix,) if prefix is not None else tuple(segments or ())
        key_mode = KeyMode(key_mode)
        if key_mode == KeyMode.UUID:
            if salt is not None or min_length is not None:
                raise ConfigurationError(f"{name}: salt and min_length only apply to integer keys")
            entity = UuidKeyed(
                name=name, segments=parts,
                use_prefix_in_routes=use_prefix_in_routes, allow_raw_keys=allow_raw_keys,
            )
        else:
            entity = IntegerKeyed(
                name=name, segments=parts, salt=salt, min_length=min_length,
                use_prefix_in_routes=use_prefix_in_routes, allow_raw_keys=allow_raw_keys,
            )
        return self._store(entity)

    def add_public_id_segment(self, entity_type: EntityRef, segment: str) -> Entity:
        """Appends a segment to a registered entity's compositional prefix."""
        entity = self.get(entity_type)
        updated = type(entity)(**{**entity.model_dump(), "segments": (*entity.segments, segment)})
        return self._store(updated, replacing=True)

    def _store(self, entity: Entity, replacing: bool = False) -> Entity:
        if entity.name in self._entities and not replacing:
            raise ConfigurationError(f"Entity {entity.name!r} is already registered")
        separator = self.settings.separator
        for segment in entity.segments:
            if separator in segment:
                raise ConfigurationError(
                    f"{entity.name}: segment {segment!r} contains the separator {separator!r}"
                )

        prefix = entity.prefix(separator)
        for other in self._entities.values():
            if other.name != entity.name and other.prefix(separator) == prefix:
                raise ConfigurationError(
                    f"{entity.name}: prefix {prefix!r} is already used by {other.name}"
                )

        self._entities[entity.name] = entity
        logger.info(f"Registered {entity.name} ({entity.key_mode.value} keys) with prefix {prefix!r}")
        return entity

    def get(self, entity_type: EntityRef) -> Entity:
        name = entity_type.name if isinstance(entity_type, EntityConfig) else entity_type
        try:
            return self._entities[name]
        except KeyError:
            raise ConfigurationError(f"Entity {name!r} is not registered") from None

    def __contains__(self, name: str) -> bool:
        return name in self._entities

    def __iter__(self):
        return iter(self._entities.values())

    # --- ENCODING ---

    def prefix(self, entity_type: EntityRef) -> str:
        return self.get(entity_type).prefix(self.settings.separator)

    def encoded_id(self, entity_type: EntityRef, key: InternalKey) -> str:
        """The bare hash, without prefix."""
        return encode_key(key, self.get(entity_type), self.settings)

    def to_public_id(self, entity_type: EntityRef, key: InternalKey) -> str:
        entity = self.get(entity_type)
        encoded = encode_key(key, entity, self.settings)
        return compose(entity.segments, encoded, self.settings.separator)

    def to_param(self, entity_type: EntityRef, key: InternalKey) -> str:
        """
        The short form for URLs: ``usr_k5qx9zab`` when prefixes are used in
        routes, ``k5qx9zab`` otherwise. The entity setting wins over the global one.
        """
        entity = self.get(entity_type)
        use_prefix = entity.use_prefix_in_routes
        if use_prefix is None:
            use_prefix = self.settings.use_prefix_in_routes
        if use_prefix:
            return self.to_public_id(entity, key)
        return self.encoded_id(entity, key)

    # --- LOOKUP ---

    def resolve(self, entity_type: EntityRef, value: str) -> Union[Resolved, NotFound]:
        return resolve_key(value, self.get(entity_type), self.settings)

    def lookup_any(self, entity_type: EntityRef, value: str) -> Optional[InternalKey]:
        """Internal key for a public id, bare hash or raw key; None when nothing resolves."""
        result = self.resolve(entity_type, value)
        return result.key if isinstance(result, Resolved) else None

    def lookup_public_id(self, entity_type: EntityRef, value: str) -> Optional[InternalKey]:
        """Like lookup_any, but only the full prefixed form is accepted."""
        entity = self.get(entity_type)
        separator = self.settings.separator
        if not isinstance(value, str) or separator not in value:
            return None
        result = resolve_key(value, entity, self.settings)
        return result.key if isinstance(result, Resolved) else None

    def is_valid_public_id(self, entity_type: EntityRef, value: str) -> bool:
        """True for a full public id with this entity's prefix and a hash that decodes."""
        entity = self.get(entity_type)
        if not isinstance(value, str):
            return False
        separator = self.settings.separator
        plan = resolve(value, entity.prefix(separator), separator, entity.key_mode)
        if not isinstance(plan, FullPublicId):
            return False
        try:
            decode_key(plan.hash_part, entity, self.settings)
        except IdentifierError:
            return False
        return True
