"""Error taxonomy for loading and migrating saved diagrams."""

from __future__ import annotations


class MigrationError(Exception):
    """Base class for every error raised while loading a diagram."""


class DocumentParseError(MigrationError):
    """The raw text could not be parsed into a document tree."""


class MalformedVersionError(MigrationError):
    """The ``version`` field is missing or is not a ``major.minor`` string."""


class MalformedDocumentError(MigrationError):
    """A migrated document does not satisfy the current schema.

    Raised by the decoder, never by the rewrite rules.
    """
