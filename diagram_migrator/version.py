"""Schema versions and the compatibility gate that decides whether to migrate."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

from .errors import MalformedVersionError

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?$")


@dataclass(frozen=True, order=True)
class Version:
    major: int
    minor: int
    patch: int = 0

    @classmethod
    def parse(cls, text: Any) -> "Version":
        """Parse ``"major.minor"`` or ``"major.minor.patch"``.

        Raises:
            MalformedVersionError: If ``text`` is not a string of that shape.
        """
        if not isinstance(text, str):
            raise MalformedVersionError(f"Version must be a string, got {type(text).__name__}")
        match = _VERSION_RE.match(text.strip())
        if match is None:
            raise MalformedVersionError(f"Cannot parse version '{text}'")
        major, minor, patch = match.groups()
        return cls(int(major), int(minor), int(patch or 0))

    def compatible_with(self, other: "Version") -> bool:
        """True if a document saved as ``self`` loads as ``other`` without rewriting.

        The schema only changed shape across major releases, so any document
        whose major component has caught up with ``other`` is already current.
        """
        return self.major >= other.major

    def __str__(self) -> str:
        if self.patch:
            return f"{self.major}.{self.minor}.{self.patch}"
        return f"{self.major}.{self.minor}"


def version_of(document: Mapping[str, Any]) -> Version:
    """Read and parse the ``version`` field of a document root."""
    if "version" not in document:
        raise MalformedVersionError("Document has no 'version' field")
    return Version.parse(document["version"])


def needs_migration(declared: Version, current: Version) -> bool:
    return not declared.compatible_with(current)
