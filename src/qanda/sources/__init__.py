"""Value sources feeding the placeholder substitution engine."""

from .clipboard import NativeClipboard
from .console import ConsoleValueSource
from .static import StaticValueSource

__all__ = [
    "ConsoleValueSource",
    "NativeClipboard",
    "StaticValueSource",
]
