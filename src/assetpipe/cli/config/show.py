"""
assetpipe config show command.

SUMMARY: Show current configuration

Displays the configuration merged from bundled defaults, project overrides
(.assetpipe/config/*.yaml) and ASSETPIPE_* environment variables.
"""

from __future__ import annotations

import argparse
import sys

from assetpipe.cli import OutputFormatter, add_json_flag, add_repo_root_flag, get_repo_root
from assetpipe.core.config import ConfigManager
from assetpipe.core.exceptions import AssetpipeError
from assetpipe.core.utils.io import dump_yaml_string

SUMMARY = "Show current configuration"


def _nest_key(key: str, value):
    """Nest a dot-notation key into a YAML/JSON-friendly mapping."""
    parts = [p for p in str(key).split(".") if p]
    out = value
    for part in reversed(parts):
        out = {part: out}
    return out


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'css.compiler_path')",
    )
    parser.add_argument(
        "--format",
        choices=["json", "yaml", "table"],
        default="table",
        help="Output format (default: table)",
    )
    add_json_flag(parser)
    add_repo_root_flag(parser)


def _format_value(value, indent: int = 0) -> str:
    """Format a value for table display."""
    prefix = "  " * indent
    if isinstance(value, dict):
        lines = []
        for k, v in value.items():
            formatted = _format_value(v, indent + 1)
            if "\n" in formatted:
                lines.append(f"{prefix}{k}:")
                lines.append(formatted)
            else:
                lines.append(f"{prefix}{k}: {formatted}")
        return "\n".join(lines)
    if isinstance(value, list):
        if not value:
            return "[]"
        return f"[{', '.join(str(v) for v in value)}]"
    return str(value)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    output_format = "json" if args.json else args.format

    try:
        manager = ConfigManager(get_repo_root(args))
        config_data = manager.load_config(validate=True)
    except AssetpipeError as e:
        formatter.error(e, error_code="config_show_error")
        return 1

    if args.key:
        value = manager.get(args.key)
        if value is None:
            formatter.text(f"Key not found: {args.key}")
            return 1
        if output_format == "json":
            formatter.json_output({args.key: value})
        elif output_format == "yaml":
            formatter.text(dump_yaml_string(_nest_key(args.key, value)).rstrip())
        else:
            formatter.text(f"{args.key}:")
            formatter.text(_format_value(value, indent=1))
        return 0

    if output_format == "json":
        formatter.json_output(config_data)
    elif output_format == "yaml":
        formatter.text(dump_yaml_string(config_data).rstrip())
    else:
        formatter.text("assetpipe configuration")
        formatter.text("=" * 60)
        for section in sorted(config_data):
            formatter.text("")
            formatter.text(f"[{section}]")
            value = config_data[section]
            if isinstance(value, dict):
                for k, v in value.items():
                    formatter.text(f"  {k}: {_format_value(v, 1)}")
            else:
                formatter.text(f"  {_format_value(value)}")

    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
