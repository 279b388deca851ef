"""JSON formatter for parse results."""

from __future__ import annotations

import json
from typing import Iterable

from vdf_keyvalues.domain.exceptions import TokenizerException
from vdf_keyvalues.domain.value_objects import KeyValueMap, KeyValuePair


class OutputFormatter:
    """Formats mappings and pair streams for the command line."""

    def format_mapping(self, mapping: KeyValueMap, indent: int | None = 2) -> str:
        if indent is not None and indent <= 0:
            indent = None
        return json.dumps(mapping, ensure_ascii=False, indent=indent)

    def format_pair(self, pair: KeyValuePair) -> str:
        return json.dumps(pair.to_dict(), ensure_ascii=False)

    def format_pairs(self, pairs: Iterable[KeyValuePair]) -> str:
        return "".join(f"{self.format_pair(pair)}\n" for pair in pairs)

    def format_error(self, exception: Exception) -> str:
        if isinstance(exception, TokenizerException) and exception.line is not None:
            return (
                f"Error: {exception.reason}\n"
                f"  at line {exception.line + 1}, column {exception.column + 1}\n"
                f"  near: {exception.context!r}\n"
            )
        return f"Error: {exception}\n"
