"""
assetpipe css fingerprint command.

SUMMARY: Show the cache fingerprint of a stylesheet
"""

from __future__ import annotations

import argparse
import sys

from assetpipe.cli import OutputFormatter, add_source_arg, add_standard_flags, get_repo_root, resolve_source
from assetpipe.core.config.domains import CssConfig
from assetpipe.core.exceptions import AssetpipeError
from assetpipe.core.preprocessors.fingerprint import STYLESHEET_EXTENSIONS, dependency_set, fingerprint

SUMMARY = "Show the cache fingerprint of a stylesheet"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_source_arg(parser)
    parser.add_argument(
        "--list",
        action="store_true",
        help="Also list the files the fingerprint covers",
    )
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    source = resolve_source(args)
    if not source.is_file():
        formatter.error(FileNotFoundError(f"Source file not found: {source}"), error_code="not_found")
        return 1

    try:
        bucket = CssConfig(repo_root=get_repo_root(args)).fingerprint_bucket_seconds
    except AssetpipeError as e:
        formatter.error(e, error_code="config_error")
        return 1

    digest = fingerprint(source, extensions=STYLESHEET_EXTENSIONS, bucket_seconds=bucket)
    deps = dependency_set(source, STYLESHEET_EXTENSIONS) if args.list else []

    if formatter.json_mode:
        payload = {"source": str(source), "fingerprint": digest}
        if args.list:
            payload["dependencies"] = [str(p) for p in deps]
        formatter.json_output(payload)
        return 0

    formatter.text(digest)
    for dep in deps:
        formatter.text(f"  {dep}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
