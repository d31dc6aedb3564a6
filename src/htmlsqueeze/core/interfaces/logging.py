from __future__ import annotations

"""Logging protocols: the slice of `logging.Logger` htmlsqueeze relies on."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LoggerLikeProtocol(Protocol):
    """Logger surface used by the minifier, its collaborators and the CLI."""

    def isEnabledFor(self, level: int) -> bool: ...

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None: ...

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...


@runtime_checkable
class LoggerFactoryProtocol(Protocol):
    """Configures logging once, then returns loggers under the 'htmlsqueeze' namespace."""

    def get_logger(self, name: str) -> LoggerLikeProtocol:
        ...
