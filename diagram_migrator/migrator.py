"""Migration pipeline: version gate, ordered rewrite rules, then decoding.

A :class:`Migrator` holds configuration only. Each call to :meth:`Migrator.migrate`
works on its own copy of the document and threads its own "migrated" flag,
so one instance can serve any number of loads.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from .config import CURRENT_VERSION
from .decoder import decode
from .document import Document, load_document
from .models import Diagram, MigrationOptions, MigrationResult
from .rules import RewriteRule, default_rules
from .version import Version, needs_migration, version_of

logger = logging.getLogger(__name__)


class Migrator:
    """Brings saved diagrams up to the current schema and decodes them."""

    def __init__(
        self,
        rules: Optional[Sequence[RewriteRule]] = None,
        decoder: Callable[[Document], Diagram] = decode,
        current_version: Version = CURRENT_VERSION,
        options: Optional[MigrationOptions] = None,
    ):
        self.options = options or MigrationOptions()
        self.rules: List[RewriteRule] = list(rules) if rules is not None else default_rules(self.options)
        self.decoder = decoder
        self.current_version = current_version

    def needs_migration(self, document: Document) -> bool:
        return needs_migration(version_of(document), self.current_version)

    def run_rules(self, document: Document) -> Tuple[Document, bool, List[str]]:
        """Apply every rule in order, ignoring the version gate.

        Returns:
            The rewritten document, whether any rule changed it, and the names
            of the rules that did.
        """
        migrated = False
        applied: List[str] = []
        for rule in self.rules:
            document, changed = rule(document)
            if changed:
                logger.debug("Rule %s rewrote the document", rule.name)
                applied.append(rule.name)
            migrated = migrated or changed
        return document, migrated, applied

    def migrate(self, document: Document) -> MigrationResult:
        """Migrate ``document`` if its version requires it, then decode it.

        Raises:
            MalformedVersionError: If the version field is missing or invalid.
            MalformedDocumentError: If decoding the (migrated) tree fails.
        """
        version = version_of(document)
        if not needs_migration(version, self.current_version):
            return MigrationResult(self.decoder(document), version, False, [], document)

        working = copy.deepcopy(document)
        working, migrated, applied = self.run_rules(working)
        if migrated:
            logger.info(
                "Migrated document from version %s to %s (%s)",
                version,
                self.current_version,
                ", ".join(applied),
            )
        return MigrationResult(self.decoder(working), version, migrated, applied, working)

    def load(self, path: Path) -> MigrationResult:
        """Read a saved diagram from disk and migrate it."""
        return self.migrate(load_document(path))


def migrate(document: Document, options: Optional[MigrationOptions] = None) -> MigrationResult:
    return Migrator(options=options).migrate(document)


def load_diagram(path: Path, options: Optional[MigrationOptions] = None) -> MigrationResult:
    return Migrator(options=options).load(path)
