from __future__ import annotations

"""
Protocol describing the push-based minifier surface.

NOTE:
    StreamMinifier is the only implementation shipped; the runner helpers
    and the CLI depend on this protocol rather than on the class.
"""

from typing import Protocol, Union, runtime_checkable


@runtime_checkable
class MinifierProtocol(Protocol):
    def feed(self, chunk: Union[bytes, str]) -> str:
        ...

    def flush(self) -> str:
        ...
