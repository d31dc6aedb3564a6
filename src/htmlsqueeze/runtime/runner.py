from __future__ import annotations

from typing import IO, Any, Iterable, Iterator, Optional, Union

from htmlsqueeze.constants import DEFAULT_CHUNK_SIZE
from htmlsqueeze.core.interfaces.engine import MinifierProtocol
from htmlsqueeze.core.models import MinifyReport
from htmlsqueeze.core.interfaces.logging import LoggerLikeProtocol
from htmlsqueeze.logging.helpers import get_logger
from htmlsqueeze.runtime.driver import Chunk, StreamMinifier


def iter_minify(
    chunks: Iterable[Chunk],
    options: Any = None,
    *,
    logger: Optional[LoggerLikeProtocol] = None,
    **overrides: Any,
) -> Iterator[str]:
    """Minify an iterable of chunks lazily, yielding every non-empty output piece."""
    minifier: MinifierProtocol = StreamMinifier(options, logger=logger, **overrides)
    for chunk in chunks:
        out = minifier.feed(chunk)
        if out:
            yield out
    out = minifier.flush()
    if out:
        yield out


def minify(document: Union[str, bytes], options: Any = None, **overrides: Any) -> str:
    """Minify a whole document held in memory."""
    return ''.join(iter_minify([document], options, **overrides))


def minify_stream(
    src: IO[Any],
    dst: IO[str],
    *,
    options: Any = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    logger: Optional[LoggerLikeProtocol] = None,
) -> MinifyReport:
    """Copy *src* to *dst* through a StreamMinifier, *chunk_size* units at a time.

    *src* may be opened in text or binary mode; *dst* must accept text.
    """
    if chunk_size <= 0:
        raise ValueError('chunk_size must be a positive integer')
    log: LoggerLikeProtocol = logger or get_logger('runner')
    minifier: MinifierProtocol = StreamMinifier(options, logger=log)
    size_in = chars_out = chunks_in = chunks_out = 0

    def _emit(text: str) -> None:
        nonlocal chars_out, chunks_out
        if text:
            dst.write(text)
            chars_out += len(text)
            chunks_out += 1

    while True:
        chunk = src.read(chunk_size)
        if not chunk:
            break
        size_in += len(chunk)
        chunks_in += 1
        _emit(minifier.feed(chunk))
    _emit(minifier.flush())

    log.debug('minified %d input unit(s) into %d char(s)', size_in, chars_out)
    return MinifyReport(size_in=size_in, chars_out=chars_out, chunks_in=chunks_in, chunks_out=chunks_out)
