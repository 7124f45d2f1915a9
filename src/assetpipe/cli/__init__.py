"""
assetpipe CLI package.

Commands are auto-discovered from domain subfolders (css/, config/).
Each command module exposes SUMMARY, register_args(parser) and main(args).
"""
from ._args import add_json_flag, add_repo_root_flag, add_source_arg, add_standard_flags
from ._output import OutputFormatter
from ._utils import get_repo_root, resolve_source

__all__ = [
    "OutputFormatter",
    "add_json_flag",
    "add_repo_root_flag",
    "add_source_arg",
    "add_standard_flags",
    "get_repo_root",
    "resolve_source",
]
