"""
capordino.commands.convert - Convert a CPRT export to an OSCAL catalog.

- `capordino convert --export FILE --metadata FILE` converts local files
- `capordino convert --fetch --framework ID` downloads both from the CPRT API
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from capordino.conversion.descriptor import FrameworkMismatchError, UnknownFrameworkError
from capordino.cprt.graph import DataIntegrityError

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace) -> int:
    """Run the convert command."""
    from capordino.config import get_config
    from capordino.conversion.assembler import CatalogAssembler
    from capordino.conversion.descriptor import get_descriptor
    from capordino.cprt.client import CprtApiClient, CprtApiError
    from capordino.cprt.loader import load_export, load_metadata
    from capordino.oscal.serialize import render_markdown, to_json

    config = get_config(getattr(args, "config", None))
    framework = getattr(args, "framework", None)
    fetch = getattr(args, "fetch", False)

    try:
        if fetch:
            if not framework:
                print("Error: --fetch requires --framework", file=sys.stderr)
                return 1
            client = CprtApiClient(config["api"]["base_url"], config["api"]["timeout"])
            version = client.get_version(framework)
            graph = client.export_graph(version.framework_version_identifier)
        else:
            if not args.export or not args.metadata:
                print("Error: --export and --metadata are required without --fetch", file=sys.stderr)
                return 1
            version = load_metadata(args.metadata, framework)
            graph = load_export(args.export)
        logger.debug(
            "Loaded %d elements and %d relationships",
            graph.element_count(),
            graph.relationship_count(),
        )

        descriptor = get_descriptor(version.framework_identifier, config)
        catalog = CatalogAssembler(config).assemble(graph, version, descriptor)
    except (FrameworkMismatchError, UnknownFrameworkError, DataIntegrityError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except CprtApiError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    output_format = getattr(args, "format", "json")
    if output_format == "markdown":
        content = render_markdown(catalog)
    else:
        content = to_json(catalog) + "\n"

    output: Path | None = getattr(args, "output", None)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(content, encoding="utf-8")
        if not getattr(args, "quiet", False):
            print(f"Wrote {output_format} catalog to {output}")
    else:
        sys.stdout.write(content)

    return 0
