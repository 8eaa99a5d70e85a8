"""diagram-migrator: load saved diagrams written by older schema versions."""

from __future__ import annotations

__version__ = "1.0.0"

from .errors import DocumentParseError, MalformedDocumentError, MalformedVersionError, MigrationError
from .migrator import Migrator, load_diagram, migrate
from .models import Diagram, Edge, MigrationOptions, MigrationResult, Node
from .version import Version

__all__ = [
    "__version__",
    "Diagram",
    "DocumentParseError",
    "Edge",
    "MalformedDocumentError",
    "MalformedVersionError",
    "MigrationError",
    "MigrationOptions",
    "MigrationResult",
    "Migrator",
    "Node",
    "Version",
    "load_diagram",
    "migrate",
]
