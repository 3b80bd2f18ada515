"""
Input validation for leaderboard submissions using Pydantic v2
Validates reaction times, normalizes codes and sanitizes free-text info
"""

import logging
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidReactionTime

logger = logging.getLogger(__name__)

MAX_REACTION_TIME_MS = 3000
MAX_INFO_LENGTH = 32
CODE_LENGTH = 6
CODE_PATTERN = re.compile(r"[0-9]{6}")
FULLWIDTH_COMMA = "\uff0c"

# Everything str.splitlines() would break on, so a stored line stays one record
_LINE_BREAKS = re.compile(r"[\r\n\v\f\x1c-\x1e\x85\u2028\u2029]")

# Lone surrogates cannot be encoded, so they never reach the UTF-8 store
_SURROGATES = re.compile(r"[\ud800-\udfff]")


def is_valid_code(value: Any) -> bool:
    """True for a string of exactly six ASCII digits."""
    return isinstance(value, str) and CODE_PATTERN.fullmatch(value) is not None


class InputSanitizer:
    """Utility class for input sanitization"""

    @staticmethod
    def sanitize_info(value: str, max_length: int = MAX_INFO_LENGTH) -> str:
        """Bound info text and make it safe for the comma-separated store"""
        value = _SURROGATES.sub("", value)
        value = value[:max_length]

        # Keep the CSV shape intact
        value = value.replace(",", FULLWIDTH_COMMA)
        value = _LINE_BREAKS.sub(" ", value)

        # Remove null bytes
        value = value.replace("\0", "")

        # Lines are trimmed on read; drop what would not round-trip
        return value.rstrip()


class SubmitRequest(BaseModel):
    """Validated submission payload"""

    reactionTime: float = Field(
        ...,
        gt=0,
        le=MAX_REACTION_TIME_MS,
        allow_inf_nan=False,
        description="Reaction time in ms (0 < t <= 3000)",
    )
    info: str = Field("", max_length=MAX_INFO_LENGTH, description="Sanitized note")
    code: Optional[str] = Field(None, description="Client supplied 6-digit code")

    @field_validator("reactionTime", mode="before")
    @classmethod
    def validate_reaction_time_type(cls, v: Any) -> Any:
        """Only real numbers; no bools, no numeric strings"""
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError(f"reactionTime must be a number, got {type(v).__name__}")
        return v

    @field_validator("info", mode="before")
    @classmethod
    def sanitize_info(cls, v: Any) -> str:
        if not isinstance(v, str):
            return ""
        return InputSanitizer.sanitize_info(v)

    @field_validator("code", mode="before")
    @classmethod
    def normalize_code(cls, v: Any) -> Optional[str]:
        """Anything but a well-formed code asks for a freshly allocated one"""
        if v is None:
            return None
        if not is_valid_code(v):
            logger.debug(f"Ignoring malformed code {v!r}")
            return None
        return v

    model_config = ConfigDict(frozen=True)


def validate_submission(
    reaction_time: Any, info: Any = None, code: Any = None
) -> SubmitRequest:
    """
    Validate and sanitize a submission

    Returns:
        SubmitRequest: Validated submission

    Raises:
        InvalidReactionTime: If the reaction time is rejected
        ValidationError: For any other field
    """
    try:
        return SubmitRequest(reactionTime=reaction_time, info=info, code=code)
    except ValidationError as e:
        logger.warning(f"Submission rejected: {e}")
        if any(err["loc"][:1] == ("reactionTime",) for err in e.errors()):
            raise InvalidReactionTime(
                f"Invalid reaction time: {reaction_time!r}"
            ) from e
        raise


__all__ = [
    "CODE_LENGTH",
    "CODE_PATTERN",
    "FULLWIDTH_COMMA",
    "MAX_INFO_LENGTH",
    "MAX_REACTION_TIME_MS",
    "InputSanitizer",
    "SubmitRequest",
    "is_valid_code",
    "validate_submission",
]
