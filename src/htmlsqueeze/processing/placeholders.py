from __future__ import annotations

import secrets
from typing import Dict, Optional

from htmlsqueeze.constants import PLACEHOLDER_TEMPLATE
from htmlsqueeze.core.interfaces.logging import LoggerLikeProtocol
from htmlsqueeze.logging.helpers import get_logger


class PlaceholderStore:
    """Instance-scoped token → original text mapping.

    Every token is inserted once by `preserve` and removed once by `restore`.
    Tokens embed a random per-store nonce and a counter; they never contain
    whitespace or angle brackets, so no whitespace rule can alter them.

    A token present more than once in a restored text only has its first
    occurrence replaced; the entry is consumed and later occurrences are left
    as literal text. Only a document that already contains the exact token
    (nonce included) can hit this.
    """

    def __init__(self, *, nonce: Optional[str] = None, logger: Optional[LoggerLikeProtocol] = None) -> None:
        self._nonce = nonce or secrets.token_hex(8)
        self._counter = 0
        self._entries: Dict[str, str] = {}
        self._log = logger or get_logger('processing.placeholders')

    @property
    def counter(self) -> int:
        return self._counter

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, token: object) -> bool:
        return token in self._entries

    def preserve(self, content: str) -> str:
        """Store *content* and return the token standing in for it."""
        token = PLACEHOLDER_TEMPLATE.format(nonce=self._nonce, index=self._counter)
        self._entries[token] = content
        self._counter += 1
        return token

    def restore(self, text: str) -> str:
        """Replace every stored token found in *text* and forget those entries."""
        if not self._entries:
            return text
        for token in [t for t in self._entries if t in text]:
            text = text.replace(token, self._entries.pop(token), 1)
        return text

    def clear(self) -> None:
        if self._entries:
            self._log.debug('discarding %d unresolved placeholder(s)', len(self._entries))
        self._entries.clear()
        self._counter = 0
