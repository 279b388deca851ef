"""Token and key/value pair value objects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .enums import TokenType

KeyValueMap = dict[str, Union[str, "KeyValueMap"]]


@dataclass(frozen=True)
class Token:
    """One structural token. ``text`` is set for keys and values only."""

    type: TokenType
    text: str | None = None

    @classmethod
    def key(cls, text: str) -> Token:
        return cls(TokenType.KEY, text)

    @classmethod
    def value(cls, text: str) -> Token:
        return cls(TokenType.VALUE, text)

    @classmethod
    def nest_start(cls) -> Token:
        return cls(TokenType.NEST_START)

    @classmethod
    def nest_end(cls) -> Token:
        return cls(TokenType.NEST_END)

    def __str__(self) -> str:
        if self.text is None:
            return self.type.name
        return f"{self.type.name}({self.text!r})"


@dataclass(frozen=True)
class KeyValuePair:
    """A leaf value together with the path of keys leading to it."""

    key_path: tuple[str, ...]
    value: str

    @property
    def dotted_key(self) -> str:
        """Display form of the path. Not reversible: keys may contain dots."""
        return ".".join(self.key_path)

    def to_dict(self) -> dict[str, object]:
        return {"key_path": list(self.key_path), "value": self.value}
