"""
elements – Protected region table for htmlsqueeze.

PROTECTED_ELEMENTS is the single source of truth for the regions whose
content must never reach the whitespace rules:
  • HTML comments (dropped or kept later, depending on the options)
  • <script>, <style>, <textarea> and <pre> bodies

The order is fixed; the extractor walks it deterministically and always
takes the earliest opener in the buffer.
"""

import re
from typing import Tuple

from htmlsqueeze.constants import UNTOUCHABLE_ELEMENTS
from htmlsqueeze.core.models import ProtectedElementSpec


def _tagged(name: str) -> ProtectedElementSpec:
    return ProtectedElementSpec(
        name=name,
        opener=re.compile(rf'<{name}\b[^>]*?>', re.IGNORECASE),
        closer=re.compile(rf'</{name}>\s*', re.IGNORECASE),
    )


COMMENT = ProtectedElementSpec(
    name='<!--',
    opener=re.compile(r'<!--'),
    closer=re.compile(r'-->'),
    is_comment=True,
)

PROTECTED_ELEMENTS: Tuple[ProtectedElementSpec, ...] = (
    COMMENT,
    *(_tagged(name) for name in UNTOUCHABLE_ELEMENTS),
)


def is_conditional_comment(body: str) -> bool:
    """Return True for IE conditional comments (`<!--[if IE]>…<![endif]-->`)."""
    return body.startswith('[') or '<![' in body
