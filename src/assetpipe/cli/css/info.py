"""
assetpipe css info command.

SUMMARY: Show stylesheet formats and compiler settings
"""

from __future__ import annotations

import argparse
import sys

from assetpipe.cli import OutputFormatter, add_standard_flags, get_repo_root
from assetpipe.core.exceptions import AssetpipeError
from assetpipe.core.preprocessors import SassPreprocessor

SUMMARY = "Show stylesheet formats and compiler settings"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        pre = SassPreprocessor.from_config(get_repo_root(args))
    except AssetpipeError as e:
        formatter.error(e, error_code="config_error")
        return 1

    example = pre.build_command(pre.settings.stylesheets_path / "<file>.scss")
    data = {
        "supported_extensions": sorted(pre.supported_extensions()),
        "output_extension": pre.output_extension(),
        "content_type": pre.content_type(),
        "compiler_path": pre.settings.compiler_path,
        "command": example.argv,
    }

    if formatter.json_mode:
        formatter.json_output(data)
        return 0

    formatter.text("Stylesheet preprocessor")
    formatter.text_kv("extensions", ", ".join(data["supported_extensions"]))
    formatter.text_kv("output", f".{data['output_extension']} ({data['content_type']})")
    formatter.text_kv("compiler", data["compiler_path"])
    formatter.text_kv("command", example.command_line)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
