from __future__ import annotations

import logging
from typing import Optional, TextIO

from htmlsqueeze.logging.helpers import get_logger, reset_base_logger, setup_base_logger


class DefaultLoggerFactory:
    """Configure the 'htmlsqueeze' logger tree on first use and hand out scoped loggers.

    Library modules never build a factory; they call `get_logger` and inherit
    whatever the CLI (or an embedding application) configured. With
    `replace=True` the handlers of an earlier configuration are dropped first,
    which lets the CLI switch between plain and JSON output in one process.
    """

    def __init__(
        self,
        *,
        json_logs: bool = False,
        level: int = logging.INFO,
        stream: Optional[TextIO] = None,
        replace: bool = False,
    ) -> None:
        self._json = bool(json_logs)
        self._level = int(level)
        self._stream: Optional[TextIO] = stream
        self._replace = bool(replace)
        self._configured = False

    @property
    def json_logs(self) -> bool:
        return self._json

    def _ensure_config(self) -> None:
        if self._configured:
            return
        if self._replace:
            reset_base_logger()
        setup_base_logger(json_logs=self._json, level=self._level, stream=self._stream)
        self._configured = True

    def get_logger(self, name: str) -> logging.Logger:
        self._ensure_config()
        return get_logger(name)
