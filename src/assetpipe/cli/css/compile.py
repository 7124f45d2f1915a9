"""
assetpipe css compile command.

SUMMARY: Compile a stylesheet through the preprocessing pipeline

Prints the compiled CSS (or writes it to --output). When the compiler
fails, the fallback error stylesheet is emitted instead and the command
exits non-zero.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from assetpipe.cli import OutputFormatter, add_source_arg, add_standard_flags, get_repo_root, resolve_source
from assetpipe.core.exceptions import AssetpipeError
from assetpipe.core.preprocessors import build_default_pipeline
from assetpipe.core.utils.io import write_text

SUMMARY = "Compile a stylesheet through the preprocessing pipeline"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_source_arg(parser)
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Recompile even when a cached artifact matches",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        help="Write the artifact to this file instead of stdout",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        pipeline = build_default_pipeline(get_repo_root(args))
        artifact = pipeline.process(resolve_source(args), use_cache=not args.no_cache)
    except (AssetpipeError, FileNotFoundError) as e:
        formatter.error(e, error_code="css_compile_error")
        return 1

    if args.output:
        write_text(Path(args.output), artifact.body)

    if formatter.json_mode:
        payload = {
            "source": str(artifact.source),
            "fingerprint": artifact.fingerprint,
            "content_type": artifact.content_type,
            "from_cache": artifact.from_cache,
            "failed": artifact.failed,
        }
        if args.output:
            payload["output"] = str(Path(args.output).absolute())
        else:
            payload["body"] = artifact.body
        formatter.success(payload, "", status="failed" if artifact.failed else "success")
    elif not args.output:
        formatter.raw(artifact.body)

    return 1 if artifact.failed else 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
