from enum import Enum
from typing import Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_validator

from core_logic import ConfigurationError
from segments import join_segments


class KeyMode(str, Enum):
    INTEGER = "integer"
    UUID = "uuid"


class EntityConfig(BaseModel):
    """Registration record for one entity type. Immutable once registered."""
    model_config = ConfigDict(frozen=True)

    name: str
    segments: Tuple[str, ...]
    # None inherits Settings.use_prefix_in_routes
    use_prefix_in_routes: Optional[bool] = None
    # Whether a bare input may be taken as the raw primary key when it does not decode
    allow_raw_keys: bool = True

    @field_validator('name')
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ConfigurationError("Entity name cannot be empty")
        return v.strip()

    @field_validator('segments', mode='before')
    def normalize_segments(cls, v):
        if isinstance(v, str):
            v = (v,)
        segments = tuple(str(s).strip().lower() for s in (v or ()))
        if not segments:
            raise ConfigurationError(
                "No public id prefix has been set. Pass a prefix or at least one segment."
            )
        if not all(segments):
            raise ConfigurationError("Public id segments cannot be empty")
        return segments

    def prefix(self, separator: str) -> str:
        return join_segments(self.segments, separator)


class IntegerKeyed(EntityConfig):
    key_mode: Literal[KeyMode.INTEGER] = KeyMode.INTEGER
    # Per-entity overrides, falling back to the global settings
    salt: Optional[str] = None
    min_length: Optional[int] = None

    @field_validator('min_length')
    def validate_min_length(cls, v):
        if v is not None and v < 0:
            raise ConfigurationError("min_length must be >= 0")
        return v


class UuidKeyed(EntityConfig):
    key_mode: Literal[KeyMode.UUID] = KeyMode.UUID


Entity = Union[IntegerKeyed, UuidKeyed]
