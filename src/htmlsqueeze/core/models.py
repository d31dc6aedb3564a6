from __future__ import annotations

import enum
import re
from dataclasses import asdict, dataclass, fields, replace as _dc_replace
from typing import Any, Mapping, Optional

from htmlsqueeze.logging.helpers import get_logger

_log = get_logger('config')


class ConfigurationError(ValueError):
    """Raised when a recognized option carries a non-boolean value."""


# Original option spellings accepted by `MinifierOptions.from_mapping`.
OPTION_ALIASES: Mapping[str, str] = {
    'stripCarriageReturns': 'strip_carriage_returns',
    'trimLines': 'trim_lines',
    'trimElements': 'trim_elements',
    'normalizeWhiteSpace': 'normalize_whitespace',
    'stripComments': 'strip_comments',
}


@dataclass(frozen=True)
class MinifierOptions:
    """Immutable switches for the whitespace rules; every rule is on by default."""
    strip_carriage_returns: bool = True
    trim_lines: bool = True
    trim_elements: bool = True
    normalize_whitespace: bool = True
    strip_comments: bool = True

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, bool):
                raise ConfigurationError(
                    f'option {f.name!r} must be a bool, got {type(value).__name__} ({value!r})'
                )

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]] = None) -> 'MinifierOptions':
        """Build options from camelCase or snake_case keys; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in (mapping or {}).items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                _log.debug('ignoring unknown option %r', key)
                continue
            values[name] = value
        return cls(**values)

    @classmethod
    def coerce(cls, options: Any = None, **overrides: Any) -> 'MinifierOptions':
        """Accept an existing instance, a mapping or None, plus keyword overrides."""
        if isinstance(options, cls):
            if not overrides:
                return options
            return cls.from_mapping({**asdict(options), **overrides})
        if options is None or isinstance(options, Mapping):
            return cls.from_mapping({**(options or {}), **overrides})
        raise ConfigurationError(f'options must be a mapping or MinifierOptions, got {type(options).__name__}')

    def replace(self, **changes: Any) -> 'MinifierOptions':
        return _dc_replace(self, **changes)


@dataclass(frozen=True)
class ProtectedElementSpec:
    """Region descriptor: where a protected element starts and how it ends.

    `opener` finds the start delimiter and `closer`, searched from the end of
    the opener, the matching end delimiter. Tagged elements also swallow the
    whitespace runs on both sides of the region; comments do not.
    """
    name: str
    opener: re.Pattern[str]
    closer: re.Pattern[str]
    is_comment: bool = False


@dataclass(frozen=True)
class ExtractionResult:
    """Protected text plus the offset of the first region left open (len(text) if none)."""
    text: str
    stop: int


@dataclass(frozen=True)
class Boundary:
    """Three-way split of a protected buffer.

    `emit` is rule-processed and released now; `tail` is safe text held back
    until more input decides its neighbourhood; `unsafe` starts at an
    unresolved protected region or tag.
    """
    emit: str
    tail: str
    unsafe: str

    @property
    def leftover(self) -> str:
        return self.tail + self.unsafe


class StreamState(enum.Enum):
    ACCUMULATING = 'accumulating'
    FLUSHING = 'flushing'
    DONE = 'done'


@dataclass(frozen=True)
class MinifyReport:
    size_in: int
    chars_out: int
    chunks_in: int
    chunks_out: int
