"""
Diagnostic publication.

Keeps the diagnostics of every analyzed resource and hands them to the
presentation surface that shows them to the user.
"""

from typing import Dict, Iterator, List, Optional, Protocol, Tuple

from .constants import DIAGNOSTIC_SOURCE
from .models import Diagnostic
from ..utils.logger_setup import get_logger

logger = get_logger(__name__)


class DiagnosticSurface(Protocol):
    """Where published diagnostics are presented."""

    def set(self, uri: str, diagnostics: List[Diagnostic]) -> None: ...

    def delete(self, uri: str) -> None: ...

    def clear(self) -> None: ...


class DiagnosticCollection:
    """In-memory presentation surface, read back by the CLI and tests."""

    def __init__(self, name: str = DIAGNOSTIC_SOURCE):
        self.name = name
        self._entries: Dict[str, List[Diagnostic]] = {}

    def set(self, uri: str, diagnostics: List[Diagnostic]):
        self._entries[uri] = list(diagnostics)

    def get(self, uri: str) -> List[Diagnostic]:
        return list(self._entries.get(uri, []))

    def delete(self, uri: str):
        self._entries.pop(uri, None)

    def clear(self):
        self._entries.clear()

    def items(self) -> Iterator[Tuple[str, List[Diagnostic]]]:
        return iter(sorted(self._entries.items()))

    def __len__(self) -> int:
        return sum(len(diagnostics) for diagnostics in self._entries.values())


class DiagnosticPublisher:
    """Holds the current diagnostic set per resource and republishes it."""

    def __init__(self, surface: Optional[DiagnosticSurface] = None):
        """
        Initialize DiagnosticPublisher.

        Args:
            surface: Presentation surface. An in-memory collection is used if None.
        """
        self.surface = surface if surface is not None else DiagnosticCollection()
        self._diagnostics: Dict[str, List[Diagnostic]] = {}
        self._disposed = False

    def publish(self, uri: str, diagnostics: List[Diagnostic]):
        """
        Replace the full diagnostic set of a resource.

        An empty list removes the resource from the surface.
        """
        if self._disposed:
            raise RuntimeError("Diagnostic publisher has been disposed")

        if len(diagnostics) == 0:
            self._diagnostics.pop(uri, None)
            self.surface.delete(uri)
            return

        self._diagnostics[uri] = list(diagnostics)
        self.surface.set(uri, self._diagnostics[uri])
        logger.debug(f"Published {len(diagnostics)} diagnostic(s) for {uri}")

    def get(self, uri: str) -> List[Diagnostic]:
        return list(self._diagnostics.get(uri, []))

    def clear(self):
        """Remove all diagnostics, from memory and from the surface."""
        self._diagnostics = {}
        self.surface.clear()

    def dispose(self):
        """Tear down when the analyzer is unregistered."""
        self.clear()
        self._disposed = True
