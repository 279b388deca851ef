"""Chunk sources feeding the tokenizer: text, streams, files and URLs.

Every source yields ``str`` chunks in order. Chunk boundaries are arbitrary;
bytes are decoded incrementally so a multi-byte character split between two
reads comes out whole.
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path
from typing import IO, TYPE_CHECKING, Iterable, Iterator, Union

from vdf_keyvalues.domain.exceptions import VdfSourceException

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 65536


def iter_text_chunks(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[str]:
    chunk_size = max(chunk_size, 1)
    for start in range(0, len(text), chunk_size):
        yield text[start : start + chunk_size]


def decode_chunks(chunks: Iterable[Union[bytes, str]], encoding: str = "utf-8") -> Iterator[str]:
    """Decode a mix of bytes/str chunks, carrying partial characters over."""
    decoder = codecs.getincrementaldecoder(encoding)()
    try:
        for chunk in chunks:
            text = decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
            if text:
                yield text
        tail = decoder.decode(b"", final=True)
    except UnicodeDecodeError as exc:
        raise VdfSourceException(f"Input is not valid {encoding}: {exc}") from exc
    if tail:
        yield tail


def iter_stream_chunks(
    stream: IO[str] | IO[bytes],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = "utf-8",
) -> Iterator[str]:
    """Read a text or binary stream until EOF."""

    def _reads() -> Iterator[Union[bytes, str]]:
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                return
            yield chunk

    yield from decode_chunks(_reads(), encoding)


def iter_file_chunks(
    path: Path | str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = "utf-8",
) -> Iterator[str]:
    path = Path(path)
    if not path.is_file():
        raise VdfSourceException(f"VDF file not found: '{path}'")

    logger.debug("Reading %s in chunks of %d bytes", path, chunk_size)
    with open(path, "rb") as f:
        yield from iter_stream_chunks(f, chunk_size, encoding)


def iter_url_chunks(
    url: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    encoding: str = "utf-8",
    timeout: float = 30.0,
    client: httpx.Client | None = None,
) -> Iterator[str]:
    """Stream a remote VDF document over HTTP(S)."""
    import httpx

    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=timeout, follow_redirects=True)

    logger.info("Fetching %s", url)
    try:
        with client.stream("GET", url) as response:
            response.raise_for_status()
            yield from decode_chunks(response.iter_bytes(chunk_size), encoding)
    except httpx.HTTPError as exc:
        raise VdfSourceException(f"Failed to fetch '{url}': {exc}") from exc
    finally:
        if owns_client:
            client.close()
