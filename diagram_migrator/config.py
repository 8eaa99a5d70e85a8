"""Configuration paths and engine-wide constants."""

from __future__ import annotations

import os
from pathlib import Path

from .version import Version

BASE_DIR = Path(os.environ.get("DMIG_HOME", str(Path.home() / ".dmig"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

# Schema version written by this release. Documents from an older major
# version are migrated on load.
CURRENT_VERSION = Version(3, 8)
