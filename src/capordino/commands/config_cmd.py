"""
capordino.commands.config_cmd - Inspect the effective configuration.

- `capordino config path` - Show which .capordino.toml is in use
- `capordino config show` - Print the merged configuration as TOML
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import tomlkit


def run(args: argparse.Namespace) -> int:
    """Run the config command."""
    from capordino.config import find_config_file, get_config

    action = getattr(args, "config_action", None)
    config_path = getattr(args, "config", None)

    if action == "path":
        path = config_path or find_config_file(Path.cwd())
        if path is None:
            print("No .capordino.toml found (using defaults)")
            return 1
        print(path)
        return 0
    elif action == "show":
        config = get_config(config_path)
        sys.stdout.write(tomlkit.dumps(config))
        return 0
    else:
        print("Usage: capordino config <path|show>", file=sys.stderr)
        return 1
