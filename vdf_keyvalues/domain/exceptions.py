"""Domain exception hierarchy."""

from __future__ import annotations


class VdfException(Exception):
    pass


class TokenizerException(VdfException):
    """Malformed input detected by the tokenizer.

    ``line`` and ``column`` are 0-based and point at the offending character;
    ``context`` holds the most recently consumed characters. All three are
    None when position tracking is disabled.
    """

    default_message = "Malformed VDF input."

    def __init__(
        self,
        message: str | None = None,
        *,
        line: int | None = None,
        column: int | None = None,
        context: str | None = None,
    ) -> None:
        self.reason = message or self.default_message
        self.line = line
        self.column = column
        self.context = context
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.line is None:
            return self.reason
        return f"{self.reason} (line {self.line}, column {self.column}, near {self.context!r})"


class TooManyBracketsException(TokenizerException):
    default_message = "Too many closing brackets."


class OpenBracketAfterValueException(TokenizerException):
    default_message = "Unexpected open bracket after value."


class CloseBracketAfterKeyException(TokenizerException):
    default_message = "Unexpected close bracket after key."


class NoCharacterToEscapeException(TokenizerException):
    default_message = "No character to escape."


class UnsupportedEscapeSequenceException(TokenizerException):
    def __init__(self, sequence: str, **kwargs) -> None:
        self.sequence = sequence
        super().__init__(f"Unsupported escape sequence: {sequence!r}.", **kwargs)


class EscapeOutsideQuoteException(TokenizerException):
    default_message = "Cannot escape outside of quoted key/value."


class MalformedIngestionException(TokenizerException):
    default_message = "Exactly one character must be ingested per call."


class UnexpectedEndOfInputException(TokenizerException):
    default_message = "Unexpected end of input."


class AggregatorException(VdfException):
    pass


class EmptyKeyEncounteredException(AggregatorException):
    pass


class VdfSourceException(VdfException):
    pass
