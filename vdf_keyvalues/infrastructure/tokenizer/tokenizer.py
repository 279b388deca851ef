"""Character-driven tokenizer for the KeyValues (VDF) text format.

https://developer.valvesoftware.com/wiki/KeyValues#About_KeyValues_Text_File_Format

The tokenizer is fed one character at a time. It holds back exactly one
character so that it can look at the next one before deciding what to do
(``//`` starts a comment, ``\\`` starts an escape). The first call therefore
emits nothing, and ``flush()`` must be called once at end of input.
"""

from __future__ import annotations

import logging

from vdf_keyvalues.config import DiagnosticsConfig, TokenizerConfig
from vdf_keyvalues.domain.enums import EscapePolicy, TokenizerState, TokenType
from vdf_keyvalues.domain.exceptions import (
    CloseBracketAfterKeyException,
    EscapeOutsideQuoteException,
    MalformedIngestionException,
    NoCharacterToEscapeException,
    OpenBracketAfterValueException,
    TokenizerException,
    TooManyBracketsException,
    UnexpectedEndOfInputException,
    UnsupportedEscapeSequenceException,
)
from vdf_keyvalues.domain.value_objects import Token

from .diagnostics import PositionTracker

logger = logging.getLogger(__name__)

BOM = "\ufeff"
CARRIAGE_RETURN = "\r"
NEW_LINE = "\n"
WHITESPACE_CHARS = (" ", "\t")
QUOTE = '"'
BRACKET_OPEN = "{"
BRACKET_CLOSE = "}"
ESCAPE = "\\"
COMMENT_START = "//"

# Escape sequences replaced by their second character.
COLLAPSED_ESCAPES = {"\\\\": "\\", '\\"': '"'}
# Escape sequences kept as written, backslash included.
VERBATIM_ESCAPES = frozenset({"\\n", "\\t"})

_S = TokenizerState
_QUOTED_STATES = frozenset({_S.IN_KEY_QUOTED, _S.IN_VALUE_QUOTED})
_UNQUOTED_STATES = frozenset({_S.IN_KEY_UNQUOTED, _S.IN_VALUE_UNQUOTED})
_COMMENT_STATES = frozenset({_S.COMMENT_AFTER_KEY, _S.COMMENT_AFTER_VALUE})

# State to return to once the current token (or comment) is over.
_KEY_SIDE = frozenset({_S.IN_KEY_QUOTED, _S.IN_KEY_UNQUOTED, _S.AFTER_KEY, _S.COMMENT_AFTER_KEY})


class Tokenizer:
    """Resumable VDF tokenizer. One instance per parse session."""

    def __init__(
        self,
        config: TokenizerConfig | None = None,
        diagnostics: DiagnosticsConfig | None = None,
    ) -> None:
        self._config = config or TokenizerConfig()
        self._diagnostics = diagnostics or DiagnosticsConfig()
        self._escape_policy = EscapePolicy.from_string(self._config.escape_policy)
        self.reset()

    def reset(self) -> None:
        self._state = TokenizerState.AFTER_VALUE
        self._parts: list[str] = []
        self._depth = 0
        self._pending: str | None = None
        self._finished = False
        self._failed = False
        self._tracker: PositionTracker | None = None
        if self._diagnostics.track_position:
            self._tracker = PositionTracker(self._diagnostics.debug_buffer_size)

    @property
    def state(self) -> TokenizerState:
        return self._state

    @property
    def depth(self) -> int:
        return self._depth

    def ingest_char(self, char: str) -> list[Token]:
        """Consume one character and return the tokens it completed."""
        if not isinstance(char, str) or len(char) != 1:
            raise MalformedIngestionException(
                f"Should ingest 1 character each time, got {char!r}. "
                "Use `ingest_text` for multiple characters."
            )
        self._check_usable()

        emitted: list[Token] = []
        if self._pending is None:
            self._pending = char
            return emitted

        current, self._pending = self._pending, char
        if self._process(current, char, emitted):
            # The lookahead was part of an escape sequence.
            self._pending = None
        return emitted

    def ingest_text(self, text: str) -> list[Token]:
        emitted: list[Token] = []
        for char in text:
            emitted.extend(self.ingest_char(char))
        return emitted

    def flush(self) -> list[Token]:
        """Resolve held-back state at end of input."""
        self._check_usable()
        emitted: list[Token] = []

        pending, self._pending = self._pending, None
        if pending is not None:
            if pending == ESCAPE and self._escape_enabled and self._state in _QUOTED_STATES:
                if self._tracker is not None:
                    self._tracker.advance(pending)
                raise self._error(NoCharacterToEscapeException)
            self._process(pending, NEW_LINE, emitted)

        if self._state not in _QUOTED_STATES:
            self._dispatch(NEW_LINE, None, emitted)

        self._finished = True
        self._check_complete()
        return emitted

    @property
    def _escape_enabled(self) -> bool:
        return not self._config.disable_escape

    def _check_usable(self) -> None:
        if self._failed:
            raise MalformedIngestionException("Tokenizer failed earlier; call reset() before reuse.")
        if self._finished:
            raise MalformedIngestionException("Tokenizer already flushed; call reset() before reuse.")

    def _check_complete(self) -> None:
        if not self._config.require_complete:
            return
        if self._state in _QUOTED_STATES:
            raise self._error(UnexpectedEndOfInputException, "Unterminated quoted string at end of input.")
        if self._state == TokenizerState.AFTER_KEY:
            raise self._error(UnexpectedEndOfInputException, "Key without value at end of input.")
        if self._depth > 0:
            raise self._error(
                UnexpectedEndOfInputException,
                f"{self._depth} unclosed bracket(s) at end of input.",
            )

    def _process(self, char: str, lookahead: str | None, emitted: list[Token]) -> bool:
        """Handle one input character. Returns True if the lookahead was consumed."""
        if char in (CARRIAGE_RETURN, BOM):
            return False
        if self._tracker is not None:
            self._tracker.advance(char)
        consumed = self._dispatch(char, lookahead, emitted)
        if consumed and self._tracker is not None and lookahead is not None:
            self._tracker.advance(lookahead)
        return consumed

    def _dispatch(self, char: str, lookahead: str | None, emitted: list[Token]) -> bool:
        if self._diagnostics.verbose:
            logger.debug("state=%s char=%r lookahead=%r", self._state.name, char, lookahead)

        if char == NEW_LINE:
            self._on_new_line(emitted)
        elif char in WHITESPACE_CHARS:
            self._on_whitespace(char, emitted)
        elif char == QUOTE:
            self._on_quote(emitted)
        elif char == BRACKET_OPEN:
            self._on_bracket_open(char, emitted)
        elif char == BRACKET_CLOSE:
            self._on_bracket_close(char, emitted)
        elif char == ESCAPE and self._escape_enabled:
            return self._on_escape(lookahead)
        elif char + (lookahead or "") == COMMENT_START and self._state not in _QUOTED_STATES:
            self._on_comment(emitted)
        else:
            self._on_character(char)
        return False

    def _on_new_line(self, emitted: list[Token]) -> None:
        state = self._state
        if state in _QUOTED_STATES:
            self._parts.append(NEW_LINE)
        elif state in _UNQUOTED_STATES:
            self._finish_token(emitted)
        elif state in (_S.AFTER_KEY, _S.AFTER_VALUE):
            pass
        elif state == _S.COMMENT_AFTER_KEY:
            self._state = _S.AFTER_KEY
        elif state == _S.COMMENT_AFTER_VALUE:
            self._state = _S.AFTER_VALUE
        else:
            _unhandled(state)

    def _on_whitespace(self, char: str, emitted: list[Token]) -> None:
        state = self._state
        if state in _QUOTED_STATES:
            self._parts.append(char)
        elif state in _UNQUOTED_STATES:
            self._finish_token(emitted)
        elif state in (_S.AFTER_KEY, _S.AFTER_VALUE) or state in _COMMENT_STATES:
            pass
        else:
            _unhandled(state)

    def _on_quote(self, emitted: list[Token]) -> None:
        state = self._state
        if state in _QUOTED_STATES or state in _UNQUOTED_STATES:
            self._finish_token(emitted)
        elif state == _S.AFTER_KEY:
            self._parts.clear()
            self._state = _S.IN_VALUE_QUOTED
        elif state == _S.AFTER_VALUE:
            self._parts.clear()
            self._state = _S.IN_KEY_QUOTED
        elif state in _COMMENT_STATES:
            pass
        else:
            _unhandled(state)

    def _on_bracket_open(self, char: str, emitted: list[Token]) -> None:
        state = self._state
        if state in _QUOTED_STATES:
            self._parts.append(char)
        elif state == _S.IN_KEY_UNQUOTED:
            self._finish_token(emitted)
            self._open_nested(emitted)
        elif state == _S.AFTER_KEY:
            self._open_nested(emitted)
        elif state in (_S.IN_VALUE_UNQUOTED, _S.AFTER_VALUE):
            raise self._error(OpenBracketAfterValueException)
        elif state in _COMMENT_STATES:
            pass
        else:
            _unhandled(state)

    def _on_bracket_close(self, char: str, emitted: list[Token]) -> None:
        state = self._state
        if state in _QUOTED_STATES:
            self._parts.append(char)
        elif state in (_S.IN_KEY_UNQUOTED, _S.AFTER_KEY):
            raise self._error(CloseBracketAfterKeyException)
        elif state == _S.IN_VALUE_UNQUOTED:
            self._finish_token(emitted)
            self._close_nested(emitted)
        elif state == _S.AFTER_VALUE:
            self._close_nested(emitted)
        elif state in _COMMENT_STATES:
            pass
        else:
            _unhandled(state)

    def _on_escape(self, lookahead: str | None) -> bool:
        state = self._state
        if state in _COMMENT_STATES:
            return False
        if state not in _QUOTED_STATES:
            raise self._error(EscapeOutsideQuoteException)
        if lookahead is None:
            raise self._error(NoCharacterToEscapeException)

        sequence = ESCAPE + lookahead
        if sequence in COLLAPSED_ESCAPES:
            self._parts.append(COLLAPSED_ESCAPES[sequence])
        elif sequence in VERBATIM_ESCAPES or self._escape_policy == EscapePolicy.PASSTHROUGH:
            self._parts.append(sequence)
        else:
            raise self._error(UnsupportedEscapeSequenceException, sequence)
        return True

    def _on_comment(self, emitted: list[Token]) -> None:
        state = self._state
        if state in _COMMENT_STATES:
            return
        if state in _UNQUOTED_STATES:
            self._finish_token(emitted)
        elif state not in (_S.AFTER_KEY, _S.AFTER_VALUE):
            _unhandled(state)
        self._state = _S.COMMENT_AFTER_KEY if state in _KEY_SIDE else _S.COMMENT_AFTER_VALUE

    def _on_character(self, char: str) -> None:
        state = self._state
        if state in _QUOTED_STATES or state in _UNQUOTED_STATES:
            self._parts.append(char)
        elif state == _S.AFTER_KEY:
            self._parts[:] = [char]
            self._state = _S.IN_VALUE_UNQUOTED
        elif state == _S.AFTER_VALUE:
            self._parts[:] = [char]
            self._state = _S.IN_KEY_UNQUOTED
        elif state in _COMMENT_STATES:
            pass
        else:
            _unhandled(state)

    def _finish_token(self, emitted: list[Token]) -> None:
        """Emit the lexeme being built and move to the matching After* state."""
        if self._state in _KEY_SIDE:
            token = Token(TokenType.KEY, "".join(self._parts))
            self._state = _S.AFTER_KEY
        else:
            token = Token(TokenType.VALUE, "".join(self._parts))
            self._state = _S.AFTER_VALUE
        self._parts.clear()
        self._emit(token, emitted)

    def _open_nested(self, emitted: list[Token]) -> None:
        self._depth += 1
        self._state = _S.AFTER_VALUE
        self._emit(Token.nest_start(), emitted)

    def _close_nested(self, emitted: list[Token]) -> None:
        if self._depth == 0:
            raise self._error(TooManyBracketsException)
        self._depth -= 1
        self._state = _S.AFTER_VALUE
        self._emit(Token.nest_end(), emitted)

    def _emit(self, token: Token, emitted: list[Token]) -> None:
        if self._diagnostics.verbose:
            logger.debug("emit %s (depth=%d)", token, self._depth)
        emitted.append(token)

    def _error(self, exc_type: type[TokenizerException], *args: str) -> TokenizerException:
        self._failed = True
        tracker = self._tracker
        if tracker is None:
            return exc_type(*args)
        return exc_type(*args, line=tracker.line, column=tracker.column, context=tracker.context)


def _unhandled(state: TokenizerState) -> None:
    raise AssertionError(f"Unhandled tokenizer state: {state!r}")
