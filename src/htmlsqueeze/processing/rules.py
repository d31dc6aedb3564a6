# src/htmlsqueeze/processing/rules.py
import re
from typing import Optional

from htmlsqueeze.constants import SAFE_ELEMENTS
from htmlsqueeze.core.models import MinifierOptions
from htmlsqueeze.core.interfaces.logging import LoggerLikeProtocol
from htmlsqueeze.logging.helpers import get_logger

_RE_CR = re.compile('\r')
_RE_LINE_EDGES = re.compile(r'^[^\S\n]+|[^\S\n]+$', re.MULTILINE)
_RE_SAFE_TAG = re.compile(r'\s+(</?(?:' + '|'.join(SAFE_ELEMENTS) + r')\b[^>]*>)', re.IGNORECASE)
_RE_GAP = re.compile(r'>([^<]+)')
_RE_GAP_EDGES = re.compile(r'^\s+|\s+$')
_RE_GAP_LEAD = re.compile(r'^\s+(?=\S)')
_RE_TAG = re.compile(r'<[A-Za-z!/?][^<>]*>')
_RE_TAG_PARTS = re.compile(r'("[^"]*"|\'[^\']*\')|\s+')

# Any character no rule reacts to.
_NEUTRAL = 'x'


def _collapse_gap(match: re.Match[str]) -> str:
    if match.end() < len(match.string):
        return '>' + _RE_GAP_EDGES.sub(' ', match.group(1))
    # Text after the last tag: only a leading run in front of content.
    return '>' + _RE_GAP_LEAD.sub(' ', match.group(1))


def _collapse_tag(match: re.Match[str]) -> str:
    tag = _RE_TAG_PARTS.sub(lambda m: m.group(1) or ' ', match.group(0))
    if tag.endswith(' >'):
        tag = tag[:-2] + '>'
    return tag


class RuleSet:
    """Whitespace rules for text that holds no protected content.

    Rules run in a fixed order (line trim → safe-element trim → normalize);
    each one is a no-op when its option is off and leaves its own output
    unchanged when run again.
    """

    def __init__(self, options: Optional[MinifierOptions] = None, *, logger: Optional[LoggerLikeProtocol] = None) -> None:
        self._opts = options or MinifierOptions()
        self._log = logger or get_logger('processing.rules')

    @property
    def options(self) -> MinifierOptions:
        return self._opts

    def strip_carriage_returns(self, text: str) -> str:
        if self._opts.strip_carriage_returns:
            return _RE_CR.sub('', text)
        return text

    def trim_lines(self, text: str) -> str:
        """Remove leading and trailing whitespace of every line, keeping the line feeds."""
        if self._opts.trim_lines:
            return _RE_LINE_EDGES.sub('', text)
        return text

    def trim_elements(self, text: str) -> str:
        """Drop whitespace in front of opening/closing tags of block and non-rendered elements."""
        if self._opts.trim_elements:
            return _RE_SAFE_TAG.sub(r'\1', text)
        return text

    def normalize_whitespace(self, text: str) -> str:
        """Collapse whitespace between tags, and inside tags, to single spaces."""
        if self._opts.normalize_whitespace:
            text = _RE_GAP.sub(_collapse_gap, text)
            return _RE_TAG.sub(_collapse_tag, text)
        return text

    def apply(self, text: str, context: str = '') -> str:
        """Run the line, element and normalization rules over *text*.

        Args:
            text: Protected text (placeholders instead of protected regions).
            context: Stand-in for the text already emitted in front of
                *text*, as built by `context_of` ('' at the start of a
                document). It is seen by the rules but not returned.

        Returns:
            The transformed *text*.
        """
        if not text:
            return text
        out = context + text
        out = self.trim_lines(out)
        out = self.trim_elements(out)
        out = self.normalize_whitespace(out)
        return out[len(context):]

    @staticmethod
    def context_of(emitted: str) -> str:
        """Reduce already emitted protected text to the neighbourhood the rules need.

        Emitted text ends in a non-whitespace character, so the stand-in only
        has to tell whether a gap between tags is open and whether its
        leading run is already behind. Passing the previous stand-in followed
        by the newly emitted text gives the next one.
        """
        if not emitted:
            return ''
        lt = emitted.rfind('<')
        gt = emitted.find('>', lt + 1)
        if gt < 0:
            return _NEUTRAL
        if gt == len(emitted) - 1:
            return '>'
        return '>' + _NEUTRAL
