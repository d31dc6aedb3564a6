from __future__ import annotations
"""Text-processing protocol definitions."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class RuleSetProtocol(Protocol):
    """Protocol for whitespace rule sets.

    Implementations are expected to:
      * Strip carriage returns from freshly decoded input.
      * Apply the remaining rules to text free of protected content, seeing
        `context` (a stand-in for already emitted text) without returning it.
      * Build that stand-in from the previous one plus newly emitted text.
    """

    def strip_carriage_returns(self, text: str) -> str:
        ...

    def apply(self, text: str, context: str = '') -> str:
        ...

    def context_of(self, emitted: str) -> str:
        ...


@runtime_checkable
class PlaceholderStoreProtocol(Protocol):
    """Insert-once / remove-once mapping from token to original text."""

    def preserve(self, content: str) -> str:
        ...

    def restore(self, text: str) -> str:
        ...

    def clear(self) -> None:
        ...

    def __len__(self) -> int:
        ...
