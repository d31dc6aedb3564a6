from __future__ import annotations

"""Project-wide constants used across modules.

This module isolates public constants to reduce cross-module coupling.
"""

# Elements whose surrounding whitespace can go: block-level by default, or
# not rendered at all (e.g. <meta>).
SAFE_ELEMENTS: tuple[str, ...] = (
    'address', 'area', 'article', 'aside', 'base', 'basefont', 'blockquote', 'body', 'canvas', 'caption',
    'center', 'cite', 'col', 'colgroup', 'dd', 'dir', 'div', 'dl', 'dt', 'fieldset', 'figcaption', 'figure',
    'footer', 'form', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'head', 'header', 'hgroup', 'hr', 'html', 'legend',
    'li', 'link', 'main', 'map', 'menu', 'meta', 'nav', 'noscript', 'ol', 'optgroup', 'option', 'output',
    'p', 'picture', 'pre', 'script', 'section', 'source', 'table', 'tbody', 'td', 'tfoot', 'th', 'thead',
    'title', 'tr', 'ul', 'video',
)

# Elements whose content is never touched.
UNTOUCHABLE_ELEMENTS: tuple[str, ...] = ('script', 'style', 'textarea', 'pre')

PLACEHOLDER_TEMPLATE: str = '%%-----placeholder-{nonce}-{index}-----%%'

DEFAULT_ENCODING: str = 'utf-8'
DEFAULT_CHUNK_SIZE: int = 64 * 1024
