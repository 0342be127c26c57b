"""
capordino.commands.frameworks - List the framework descriptors available.
"""

from __future__ import annotations

import argparse
import json


def run(args: argparse.Namespace) -> int:
    """Run the frameworks command."""
    from capordino.config import get_config
    from capordino.conversion.descriptor import BUILTIN_DESCRIPTORS, available_descriptors

    config = get_config(getattr(args, "config", None))
    descriptors = available_descriptors(config)

    if getattr(args, "json", False):
        data = {
            identifier: {
                "root_type": d.root_type,
                "requirement_type": d.requirement_type,
                "subrequirement_type": d.subrequirement_type,
                "item_type": d.item_type,
                "structural_relation": d.structural_relation,
                "builtin": identifier in BUILTIN_DESCRIPTORS,
            }
            for identifier, d in sorted(descriptors.items())
        }
        print(json.dumps(data, indent=2))
        return 0

    for identifier, d in sorted(descriptors.items()):
        source = "built-in" if identifier in BUILTIN_DESCRIPTORS else "config"
        chain = " -> ".join(
            t for t in (d.root_type, d.requirement_type, d.subrequirement_type, d.item_type) if t
        )
        print(f"{identifier:<20} {chain}  ({source})")
    return 0
