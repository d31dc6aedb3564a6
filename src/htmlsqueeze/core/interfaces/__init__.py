from .engine import MinifierProtocol
from .logging import LoggerFactoryProtocol, LoggerLikeProtocol
from .text import PlaceholderStoreProtocol, RuleSetProtocol

__all__ = [
    'MinifierProtocol',
    'LoggerFactoryProtocol',
    'LoggerLikeProtocol',
    'PlaceholderStoreProtocol',
    'RuleSetProtocol',
]
