from __future__ import annotations

import codecs
from typing import Any, Optional, Union

from htmlsqueeze.constants import DEFAULT_ENCODING
from htmlsqueeze.core.interfaces.logging import LoggerLikeProtocol
from htmlsqueeze.core.interfaces.text import PlaceholderStoreProtocol, RuleSetProtocol
from htmlsqueeze.core.models import MinifierOptions, StreamState
from htmlsqueeze.logging.helpers import get_logger, trace_io
from htmlsqueeze.processing.boundary import BoundaryGuard
from htmlsqueeze.processing.extractor import ProtectedRegionExtractor
from htmlsqueeze.processing.placeholders import PlaceholderStore
from htmlsqueeze.processing.rules import RuleSet

Chunk = Union[bytes, bytearray, memoryview, str]


class StreamMinifier:
    """Push-based HTML whitespace minifier.

    Call `feed` once per input chunk, in arrival order, and `flush` once the
    input is exhausted. Each call returns the text that became final; the
    concatenation of every returned string is the minified document. Input
    and output chunk boundaries are unrelated.

    States: ACCUMULATING while chunks arrive, FLUSHING while `flush` runs,
    DONE afterwards. Feeding a DONE instance starts a new document.
    """

    def __init__(self, options: Any = None, *, logger: Optional[LoggerLikeProtocol] = None, **overrides: Any) -> None:
        self._opts = MinifierOptions.coerce(options, **overrides)
        self._log: LoggerLikeProtocol = logger or get_logger('driver')
        self._store: PlaceholderStoreProtocol = PlaceholderStore(logger=self._log)
        self._rules: RuleSetProtocol = RuleSet(self._opts, logger=self._log)
        self._extractor = ProtectedRegionExtractor(self._store, self._opts, logger=self._log)
        self._guard = BoundaryGuard(logger=self._log)
        self._decoder = codecs.getincrementaldecoder(DEFAULT_ENCODING)()
        self._state = StreamState.ACCUMULATING
        self._leftover = ''
        self._context = ''

    @property
    def options(self) -> MinifierOptions:
        return self._opts

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def pending(self) -> int:
        """Number of characters currently held back."""
        return len(self._leftover)

    def feed(self, chunk: Chunk) -> str:
        """Process one input chunk and return the text that is final so far.

        Raises:
            TypeError: If *chunk* is neither text nor bytes-like.
            UnicodeDecodeError: If the bytes are not valid UTF-8.
        """
        if self._state is StreamState.DONE:
            self._state = StreamState.ACCUMULATING
        text = self._rules.strip_carriage_returns(self._decode(chunk))
        if not text:
            return ''

        buf = self._leftover + text
        protected = self._extractor.protect(buf)
        boundary = self._guard.split(protected.text, protected.stop)

        out = ''
        if boundary.emit:
            out = self._store.restore(self._rules.apply(boundary.emit, self._context))
            self._context = self._rules.context_of(self._context + boundary.emit)
        self._leftover = boundary.leftover

        trace_io(self._log, 'chunk processed', received=len(text), emitted=len(out), pending=len(self._leftover))
        return out

    def flush(self) -> str:
        """Finish the document: release everything held back and reset the instance.

        The safe part of the leftover gets the whitespace rules, since nothing
        can extend it any more; an open protected region is emitted verbatim.
        """
        self._state = StreamState.FLUSHING
        try:
            tail = self._rules.strip_carriage_returns(self._decoder.decode(b'', True))
            buf = self._leftover + tail
            out = ''
            if buf:
                protected = self._extractor.protect(buf, final=True)
                boundary = self._guard.split(protected.text, protected.stop, final=True)
                if boundary.unsafe:
                    self._log.debug('unclosed protected region flushed verbatim (%d chars)', len(boundary.unsafe))
                out = self._store.restore(self._rules.apply(boundary.emit, self._context) + boundary.unsafe)
            if len(self._store):
                self._log.warning('⚠  %d placeholder(s) left unresolved at end of stream', len(self._store))
            trace_io(self._log, 'stream flushed', emitted=len(out))
            return out
        finally:
            self._reset()

    def _decode(self, chunk: Chunk) -> str:
        if isinstance(chunk, str):
            return chunk
        if isinstance(chunk, (bytes, bytearray, memoryview)):
            return self._decoder.decode(bytes(chunk))
        raise TypeError(f'expected str or bytes-like chunk, got {type(chunk).__name__}')

    def _reset(self) -> None:
        self._leftover = ''
        self._context = ''
        self._store.clear()
        self._decoder.reset()
        self._state = StreamState.DONE
