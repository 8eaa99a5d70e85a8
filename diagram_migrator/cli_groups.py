"""Command hierarchy groups for the dmig CLI.

  dmig config   — Migration settings stored in the config file
"""

from __future__ import annotations

import typer

# ── Configuration group ──────────────────────────────────────
config_grp = typer.Typer(
    help="⚙️  Configuration — migration options in config.toml.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
