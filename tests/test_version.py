"""Tests for version parsing and the compatibility gate."""

import pytest

from diagram_migrator.errors import MalformedVersionError
from diagram_migrator.version import Version, needs_migration, version_of


class TestVersionParse:
    """Tests for Version.parse."""

    def test_major_minor(self):
        assert Version.parse("2.0") == Version(2, 0)

    def test_with_patch(self):
        version = Version.parse("3.1.2")
        assert (version.major, version.minor, version.patch) == (3, 1, 2)
        assert str(version) == "3.1.2"

    def test_surrounding_whitespace(self):
        assert Version.parse(" 3.4 ") == Version(3, 4)

    @pytest.mark.parametrize("text", ["", "3", "three.one", "3.x", "3.1.2.4", "-1.0", "v3.0"])
    def test_unparseable(self, text):
        with pytest.raises(MalformedVersionError):
            Version.parse(text)

    @pytest.mark.parametrize("value", [3, 3.0, None, True, ["3", "0"]])
    def test_non_string(self, value):
        with pytest.raises(MalformedVersionError):
            Version.parse(value)

    def test_ordering(self):
        assert Version(2, 9) < Version(3, 0) < Version(3, 0, 1) < Version(3, 1)


class TestVersionGate:
    """Tests for compatibility and needs_migration."""

    def test_older_major_needs_migration(self):
        assert needs_migration(Version(2, 0), Version(3, 8))
        assert needs_migration(Version(1, 9, 3), Version(3, 8))

    def test_same_major_is_compatible(self):
        assert not needs_migration(Version(3, 0), Version(3, 8))
        assert not needs_migration(Version(3, 8), Version(3, 8))

    def test_newer_document_is_not_migrated(self):
        assert Version(4, 0).compatible_with(Version(3, 8))
        assert not needs_migration(Version(3, 9), Version(3, 8))

    def test_version_of_reads_field(self):
        assert version_of({"version": "2.5"}) == Version(2, 5)

    def test_version_of_missing_field(self):
        with pytest.raises(MalformedVersionError, match="no 'version'"):
            version_of({"nodes": [], "edges": []})
