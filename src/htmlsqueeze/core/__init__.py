from __future__ import annotations

"""Public surface for htmlsqueeze.core.

Models and protocol types live here so that downstream code has a single,
stable import location:

    from htmlsqueeze.core import MinifierOptions, MinifierProtocol, ...
"""

from htmlsqueeze.core.interfaces import (
    LoggerFactoryProtocol,
    LoggerLikeProtocol,
    MinifierProtocol,
    PlaceholderStoreProtocol,
    RuleSetProtocol,
)
from htmlsqueeze.core.models import (
    Boundary,
    ConfigurationError,
    ExtractionResult,
    MinifierOptions,
    MinifyReport,
    ProtectedElementSpec,
    StreamState,
)

__all__ = [
    # Protocols
    "LoggerFactoryProtocol",
    "LoggerLikeProtocol",
    "MinifierProtocol",
    "PlaceholderStoreProtocol",
    "RuleSetProtocol",
    # Models
    "Boundary",
    "ConfigurationError",
    "ExtractionResult",
    "MinifierOptions",
    "MinifyReport",
    "ProtectedElementSpec",
    "StreamState",
]
