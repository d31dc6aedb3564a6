from __future__ import annotations

import re
from typing import Dict, List, Optional, Sequence, Tuple

from htmlsqueeze.core.interfaces.logging import LoggerLikeProtocol
from htmlsqueeze.core.interfaces.text import PlaceholderStoreProtocol
from htmlsqueeze.core.models import ExtractionResult, MinifierOptions, ProtectedElementSpec
from htmlsqueeze.logging.helpers import get_logger
from htmlsqueeze.processing.elements import COMMENT, PROTECTED_ELEMENTS, is_conditional_comment

_RE_SPACE = re.compile(r'\s*')


class ProtectedRegionExtractor:
    """Shield protected regions behind placeholder tokens.

    The buffer is rewritten in one left-to-right pass. At each step the
    earliest opener among all specs wins, and everything up to its closer is
    an opaque blob: a comment inside <pre> stays part of the <pre>, a <pre>
    inside a comment stays part of the comment. The pass stops at the first
    region whose closer is missing; the caller receives that offset as `stop`
    and the rest of the buffer untouched.
    """

    def __init__(
        self,
        store: PlaceholderStoreProtocol,
        options: Optional[MinifierOptions] = None,
        *,
        specs: Sequence[ProtectedElementSpec] = PROTECTED_ELEMENTS,
        logger: Optional[LoggerLikeProtocol] = None,
    ) -> None:
        self._store = store
        self._opts = options or MinifierOptions()
        self._specs = tuple(specs)
        self._log = logger or get_logger('processing.extractor')

    def protect(self, text: str, *, final: bool = False) -> ExtractionResult:
        """Replace every complete protected region of *text* with a placeholder.

        Args:
            text: Buffer to scan; may already contain placeholders.
            final: True once no more input will follow. Otherwise a tagged
                region whose trailing whitespace (or a dropped comment after
                it) runs up to the end of *text* counts as open, since that
                run may continue in the next chunk.

        Returns:
            ExtractionResult with the rewritten text and the offset (in the
            rewritten text) of the first open region, or its length.
        """
        out: List[str] = []
        pos = 0
        pending: Dict[int, Optional[re.Match[str]]] = {}

        while True:
            found = self._next_opener(text, pos, pending)
            if found is None:
                out.append(text[pos:])
                rewritten = ''.join(out)
                return ExtractionResult(rewritten, len(rewritten))

            spec, opener = found
            out.append(text[pos:opener.start()])
            closer = spec.closer.search(text, opener.end())
            resume: Optional[int] = None
            if closer is not None:
                if spec.is_comment:
                    if final or closer.end() < len(text):
                        resume = closer.end()
                else:
                    resume = self._skip_absorbed(text, closer.end(), final)

            if not spec.is_comment:
                self._swallow_whitespace(out)
            if resume is None:
                head = ''.join(out)
                self._log.debug('open %s region at offset %d', spec.name, len(head))
                return ExtractionResult(head + text[opener.start():], len(head))

            out.append(self._shield(spec, text, opener, closer))
            pos = resume

    def _next_opener(
        self,
        text: str,
        pos: int,
        pending: Dict[int, Optional[re.Match[str]]],
    ) -> Optional[Tuple[ProtectedElementSpec, re.Match[str]]]:
        best: Optional[Tuple[ProtectedElementSpec, re.Match[str]]] = None
        for idx, spec in enumerate(self._specs):
            if idx not in pending or (pending[idx] is not None and pending[idx].start() < pos):
                pending[idx] = spec.opener.search(text, pos)
            m = pending[idx]
            if m is not None and (best is None or m.start() < best[1].start()):
                best = (spec, m)
        return best

    @staticmethod
    def _swallow_whitespace(out: List[str]) -> None:
        # Tagged regions absorb the whitespace run in front of them, even when
        # a dropped comment sits inside that run.
        while out:
            last = out.pop()
            kept = last.rstrip()
            if kept:
                out.append(kept)
                return

    def _skip_absorbed(self, text: str, pos: int, final: bool) -> Optional[int]:
        """Return where scanning resumes after a tagged region closing at *pos*.

        The region also absorbs the whitespace behind it, including any run
        that continues past comments the options drop. None means the run
        reaches the end of a non-final buffer and cannot be judged yet.
        """
        dropping = self._opts.strip_comments
        while True:
            pos = _RE_SPACE.match(text, pos).end()
            rest = text[pos:pos + 4]
            if not final and (pos == len(text) or (dropping and len(rest) < 4 and '<!--'.startswith(rest))):
                return None
            if not dropping or rest != '<!--':
                return pos
            closer = COMMENT.closer.search(text, pos + 4)
            if closer is None:
                return pos if final else None
            if not final and closer.end() == len(text):
                return None
            if is_conditional_comment(text[pos + 4:closer.start()]):
                return pos
            pos = closer.end()

    def _shield(self, spec: ProtectedElementSpec, text: str, opener: re.Match[str], closer: re.Match[str]) -> str:
        if spec.is_comment:
            element = text[opener.start():closer.end()]
            body = text[opener.end():closer.start()]
            if self._opts.strip_comments and not is_conditional_comment(body):
                return ''
            return self._store.preserve(element)
        close_tag = closer.group(0).rstrip()
        return self._store.preserve(text[opener.start():closer.start()] + close_tag)
