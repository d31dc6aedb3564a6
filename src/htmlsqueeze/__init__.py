from __future__ import annotations

from htmlsqueeze.cli import HtmlSqueeze
from htmlsqueeze.core.models import ConfigurationError, MinifierOptions, MinifyReport, StreamState
from htmlsqueeze.runtime.driver import StreamMinifier
from htmlsqueeze.runtime.runner import iter_minify, minify, minify_stream

__version__ = '1.0.0'

__all__ = [
    'HtmlSqueeze',
    'ConfigurationError',
    'MinifierOptions',
    'MinifyReport',
    'StreamState',
    'StreamMinifier',
    'iter_minify',
    'minify',
    'minify_stream',
]
