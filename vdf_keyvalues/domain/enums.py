"""Token, tokenizer state and escape policy enumerations."""

from __future__ import annotations

from enum import Enum


class TokenType(Enum):
    KEY = "key"
    VALUE = "value"
    NEST_START = "nest_start"
    NEST_END = "nest_end"


class TokenizerState(Enum):
    IN_KEY_QUOTED = "in_key_quoted"
    IN_VALUE_QUOTED = "in_value_quoted"
    IN_KEY_UNQUOTED = "in_key_unquoted"
    IN_VALUE_UNQUOTED = "in_value_unquoted"
    AFTER_KEY = "after_key"
    AFTER_VALUE = "after_value"
    COMMENT_AFTER_KEY = "comment_after_key"
    COMMENT_AFTER_VALUE = "comment_after_value"


class EscapePolicy(Enum):
    """What to do with an escape sequence that is not recognized."""

    STRICT = "strict"
    PASSTHROUGH = "passthrough"

    @classmethod
    def from_string(cls, policy: str) -> EscapePolicy:
        try:
            return cls(policy.strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown escape policy: {policy!r} (expected one of: {choices})") from None
