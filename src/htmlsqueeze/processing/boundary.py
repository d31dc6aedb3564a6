from __future__ import annotations

from typing import Optional

from htmlsqueeze.core.models import Boundary
from htmlsqueeze.core.interfaces.logging import LoggerLikeProtocol
from htmlsqueeze.logging.helpers import get_logger


class BoundaryGuard:
    """Decide how much of a protected buffer can be released this cycle.

    Three offsets matter:
      • stop – first open protected region, as reported by the extractor;
      • safe – `stop`, moved back onto a trailing `<` that has no `>` yet
        (a start tag of any kind, protected or not, may still be arriving);
      • emit – end of the last complete tag before `safe`, or further up to
        the last non-whitespace character before `safe`.

    Text up to `emit` is released. Text between `emit` and `safe` is a
    whitespace run that may continue in the next chunk, so it waits. A cut
    never falls inside a tag or a whitespace run, and the rules carry the
    rest of the neighbourhood through `RuleSet.context_of`.
    """

    def __init__(self, *, logger: Optional[LoggerLikeProtocol] = None) -> None:
        self._log = logger or get_logger('processing.boundary')

    @staticmethod
    def safe_offset(text: str, stop: int) -> int:
        """Return the offset of the first character that might belong to an unfinished start tag."""
        safe = min(stop, len(text))
        while True:
            lt = text.rfind('<', 0, safe)
            if lt < 0 or text.find('>', lt, safe) >= 0:
                return safe
            safe = lt

    @staticmethod
    def tag_offset(text: str, safe: int) -> int:
        """Return the end of the last complete tag in text[:safe] (0 if there is none)."""
        lt = text.rfind('<', 0, safe)
        if lt < 0:
            return 0
        return text.find('>', lt, safe) + 1

    @staticmethod
    def emit_offset(text: str, safe: int) -> int:
        """Return how much of text[:safe] can be released."""
        # After the last tag only text and placeholders remain.
        return max(BoundaryGuard.tag_offset(text, safe), len(text[:safe].rstrip()))

    def split(self, text: str, stop: int, *, final: bool = False) -> Boundary:
        """Split *text* into the part to emit, the safe tail to hold back and the unsafe suffix.

        Args:
            text: Protected buffer (output of the extractor).
            stop: Offset of the first open protected region.
            final: No more input will follow; everything before `stop` is emitted.

        Returns:
            Boundary(emit, tail, unsafe).
        """
        if final:
            return Boundary(text[:stop], '', text[stop:])
        safe = self.safe_offset(text, stop)
        emit = self.emit_offset(text, safe)
        if safe < len(text) or emit < safe:
            self._log.debug('holding back %d char(s) (%d unsafe)', len(text) - emit, len(text) - safe)
        return Boundary(text[:emit], text[emit:safe], text[safe:])
