"""Domain service: VdfParser and whole-input entry points."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, TYPE_CHECKING, Iterable, Iterator, Union

from vdf_keyvalues.config import AppConfig
from vdf_keyvalues.infrastructure.aggregator.builder import KeyValueMapBuilder
from vdf_keyvalues.infrastructure.aggregator.key_path import KeyPathAggregator
from vdf_keyvalues.infrastructure.sources.readers import (
    iter_file_chunks,
    iter_stream_chunks,
    iter_url_chunks,
)
from vdf_keyvalues.infrastructure.tokenizer.tokenizer import Tokenizer

from .value_objects import KeyValueMap, KeyValuePair, Token

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)


class VdfParser:
    """One parse session: tokenizer -> key paths -> nested mapping.

    Incremental use::

        parser = VdfParser()
        for chunk in chunks:
            parser.feed(chunk)
        parser.flush()
        parser.result

    ``feed``/``ingest_char``/``flush`` return the pairs completed by the call
    and fold them into ``result``. ``iter_pairs`` streams pairs without
    building the mapping.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()
        self._tokenizer = Tokenizer(self._config.tokenizer, self._config.diagnostics)
        self._aggregator = KeyPathAggregator()
        self._builder = KeyValueMapBuilder(self._config.aggregator.use_latest_value)

    @property
    def result(self) -> KeyValueMap:
        return self._builder.result

    def ingest_char(self, char: str) -> list[KeyValuePair]:
        return self._fold(self._tokenizer.ingest_char(char))

    def feed(self, chunk: str) -> list[KeyValuePair]:
        return self._fold(self._tokenizer.ingest_text(chunk))

    def flush(self) -> list[KeyValuePair]:
        return self._fold(self._tokenizer.flush())

    def reset(self) -> None:
        self._tokenizer.reset()
        self._aggregator.reset()
        self._builder.reset()

    def iter_pairs(self, chunks: Iterable[str]) -> Iterator[KeyValuePair]:
        """Yield pairs as soon as they complete. ``result`` is left untouched."""
        for chunk in chunks:
            for char in chunk:
                yield from self._aggregator.consume_all(self._tokenizer.ingest_char(char))
        yield from self._aggregator.consume_all(self._tokenizer.flush())

    def parse_chunks(self, chunks: Iterable[str]) -> KeyValueMap:
        count = 0
        for chunk in chunks:
            count += len(self.feed(chunk))
        count += len(self.flush())
        logger.debug("Parsed %d key/value pairs", count)
        return self.result

    def parse_text(self, text: str) -> KeyValueMap:
        return self.parse_chunks([text])

    def parse_stream(self, stream: IO[str] | IO[bytes]) -> KeyValueMap:
        source = self._config.source
        return self.parse_chunks(iter_stream_chunks(stream, source.chunk_size, source.encoding))

    def parse_file(self, path: Path | str) -> KeyValueMap:
        source = self._config.source
        logger.info("Parsing VDF file: %s", path)
        return self.parse_chunks(iter_file_chunks(path, source.chunk_size, source.encoding))

    def parse_url(self, url: str, client: httpx.Client | None = None) -> KeyValueMap:
        source = self._config.source
        chunks = iter_url_chunks(url, source.chunk_size, source.encoding, source.timeout, client)
        return self.parse_chunks(chunks)

    def _fold(self, tokens: list[Token]) -> list[KeyValuePair]:
        pairs = self._aggregator.consume_all(tokens)
        self._builder.extend(pairs)
        return pairs


def parse_text(text: str, config: AppConfig | None = None) -> KeyValueMap:
    """Parse a complete VDF document held in memory."""
    return VdfParser(config).parse_text(text)


def parse_file(path: Path | str, config: AppConfig | None = None) -> KeyValueMap:
    return VdfParser(config).parse_file(path)


def iter_pairs(
    source: Union[str, Iterable[str]],
    config: AppConfig | None = None,
) -> Iterator[KeyValuePair]:
    """Stream (key path, value) pairs from a string or an iterable of chunks."""
    chunks = [source] if isinstance(source, str) else source
    return VdfParser(config).iter_pairs(chunks)
