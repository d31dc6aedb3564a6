"""Public API surface for htmlsqueeze.processing."""
__all__ = [
    "boundary",
    "elements",
    "extractor",
    "placeholders",
    "rules",
]
