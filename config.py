import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from core_logic import ConfigurationError, get_logger

logger = get_logger(__name__)

# ============================================================================
# DEFAULTS
# ============================================================================

DEFAULT_SEPARATOR: str = "_"
DEFAULT_BASE62_ALPHABET: str = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
DEFAULT_HASHID_ALPHABET: str = "abcdefghijklmnopqrstuvwxyz0123456789"
DEFAULT_HASHID_MIN_LENGTH: int = 8
DEFAULT_INTEGER_KEY_BITS: int = 64

# hashids refuses shorter alphabets
MIN_HASHID_ALPHABET_LENGTH: int = 16
BASE62_LENGTH: int = 62

TRUTHY = {"1", "true", "yes", "on"}

# ============================================================================
# SETTINGS
# ============================================================================


class Settings(BaseModel):
    """Immutable codec configuration shared by every entity type.

    Build it once (``get_settings()`` or ``Settings(...)``) and pass it around;
    nothing mutates it afterwards.
    """
    model_config = ConfigDict(frozen=True)

    separator: str = DEFAULT_SEPARATOR
    base62_alphabet: str = DEFAULT_BASE62_ALPHABET
    hashid_alphabet: str = DEFAULT_HASHID_ALPHABET
    hashid_min_length: int = DEFAULT_HASHID_MIN_LENGTH
    hashid_salt: Optional[str] = None
    use_prefix_in_routes: bool = False
    integer_key_bits: int = DEFAULT_INTEGER_KEY_BITS

    @model_validator(mode="after")
    def validate_settings(self):
        """Validate configuration on construction"""
        if not self.separator:
            raise ConfigurationError("separator must be a non-empty string")

        if len(self.base62_alphabet) != BASE62_LENGTH or len(set(self.base62_alphabet)) != BASE62_LENGTH:
            raise ConfigurationError("base62_alphabet must contain exactly 62 distinct characters")

        if len(set(self.hashid_alphabet)) != len(self.hashid_alphabet):
            raise ConfigurationError("hashid_alphabet must not contain duplicate characters")
        if len(self.hashid_alphabet) < MIN_HASHID_ALPHABET_LENGTH:
            raise ConfigurationError(
                f"hashid_alphabet must contain at least {MIN_HASHID_ALPHABET_LENGTH} characters"
            )
        if any(c.isspace() for c in self.hashid_alphabet):
            raise ConfigurationError("hashid_alphabet must not contain whitespace")

        for name, alphabet in (("base62_alphabet", self.base62_alphabet),
                               ("hashid_alphabet", self.hashid_alphabet)):
            shared = set(alphabet) & set(self.separator)
            if shared:
                raise ConfigurationError(
                    f"{name} shares characters {sorted(shared)} with separator {self.separator!r}"
                )

        if self.hashid_min_length < 0:
            raise ConfigurationError("hashid_min_length must be >= 0")
        if self.integer_key_bits <= 0:
            raise ConfigurationError("integer_key_bits must be positive")
        return self

    @property
    def salt(self) -> str:
        return self.hashid_salt or ""

    @property
    def max_integer_key(self) -> int:
        return 2 ** self.integer_key_bits - 1

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from the environment.

        Salt fallback chain: HASHID_SALT, then SECRET_KEY_BASE, then the empty salt.
        """
        salt = os.getenv("HASHID_SALT")
        if not salt:
            salt = os.getenv("SECRET_KEY_BASE")
            if salt:
                logger.warning("No HASHID_SALT configured, using SECRET_KEY_BASE as fallback")
            else:
                logger.warning(
                    "No HASHID_SALT configured. Hash ids are predictable to anyone who knows your record ids."
                )

        min_length = os.getenv("HASHID_MIN_LENGTH")
        key_bits = os.getenv("INTEGER_KEY_BITS")
        try:
            return cls(
                separator=os.getenv("PUBLIC_ID_SEPARATOR", DEFAULT_SEPARATOR),
                base62_alphabet=os.getenv("BASE62_ALPHABET", DEFAULT_BASE62_ALPHABET),
                hashid_alphabet=os.getenv("HASHID_ALPHABET", DEFAULT_HASHID_ALPHABET),
                hashid_min_length=int(min_length) if min_length else DEFAULT_HASHID_MIN_LENGTH,
                hashid_salt=salt or None,
                use_prefix_in_routes=os.getenv("USE_PREFIX_IN_ROUTES", "").lower() in TRUTHY,
                integer_key_bits=int(key_bits) if key_bits else DEFAULT_INTEGER_KEY_BITS,
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid identifier configuration in environment: {e}") from e


@lru_cache()
def get_settings() -> Settings:
    """
    Returns the cached, process-wide settings, loaded from the environment on first use.
    Tests call ``get_settings.cache_clear()`` to start from a clean slate.
    """
    return Settings.from_env()
