import os
import logging
from enum import Enum
from logging.handlers import RotatingFileHandler
from typing import Optional

# --- LOGGING SETUP ---

LOGGER_NAME = "public_ids"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'


def setup_logging(level: int = logging.INFO, log_dir: Optional[str] = None) -> logging.Logger:
    """Configure the library logger with a console handler and an optional rotating file"""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(log_dir, "public_ids.log"),
                maxBytes=10_485_760,
                backupCount=5
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger under the library namespace, e.g. public_ids.dispatcher"""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


# --- CUSTOM EXCEPTIONS ---

class FailureReason(str, Enum):
    INVALID_CHARACTER = "invalid_character"
    OVERFLOW = "overflow"
    PREFIX_MISMATCH = "prefix_mismatch"
    MALFORMED_INPUT = "malformed_input"


class IdentifierError(ValueError):
    """Raised by strict decoders for input that cannot name a record."""
    reason: FailureReason = FailureReason.MALFORMED_INPUT

    def __init__(self, detail: str = "Identifier could not be decoded"):
        super().__init__(detail)
        self.detail = detail


class InvalidCharacter(IdentifierError):
    reason = FailureReason.INVALID_CHARACTER


class Overflow(IdentifierError):
    reason = FailureReason.OVERFLOW


class PrefixMismatch(IdentifierError):
    reason = FailureReason.PREFIX_MISMATCH


class MalformedInput(IdentifierError):
    reason = FailureReason.MALFORMED_INPUT


class ConfigurationError(Exception):
    """Setup-time error: bad alphabets, separators or entity registrations."""
    pass


class RecordNotFound(Exception):
    def __init__(self, entity_name: str, value: str):
        super().__init__(f"Couldn't find {entity_name} with id={value!r}")
        self.entity_name = entity_name
        self.value = value
