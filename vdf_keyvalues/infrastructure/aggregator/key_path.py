"""Lifts the token stream into (key path, value) pairs."""

from __future__ import annotations

from vdf_keyvalues.domain.enums import TokenType
from vdf_keyvalues.domain.exceptions import EmptyKeyEncounteredException
from vdf_keyvalues.domain.value_objects import KeyValuePair, Token


class KeyPathAggregator:
    """Keeps the stack of enclosing keys while tokens arrive."""

    def __init__(self) -> None:
        self._stack: list[str] = []

    @property
    def key_path(self) -> tuple[str, ...]:
        return tuple(self._stack)

    def consume(self, token: Token) -> list[KeyValuePair]:
        if token.type == TokenType.KEY:
            self._stack.append(token.text or "")
        elif token.type == TokenType.VALUE:
            if not self._stack:
                raise EmptyKeyEncounteredException(f"Value {token.text!r} arrived without a key")
            pair = KeyValuePair(tuple(self._stack), token.text or "")
            self._stack.pop()
            return [pair]
        elif token.type == TokenType.NEST_START:
            pass  # the key stays on the stack as the block's prefix
        elif token.type == TokenType.NEST_END:
            if self._stack:
                self._stack.pop()
        else:
            raise AssertionError(f"Unhandled token type: {token.type!r}")
        return []

    def consume_all(self, tokens: list[Token]) -> list[KeyValuePair]:
        pairs: list[KeyValuePair] = []
        for token in tokens:
            pairs.extend(self.consume(token))
        return pairs

    def reset(self) -> None:
        self._stack.clear()
