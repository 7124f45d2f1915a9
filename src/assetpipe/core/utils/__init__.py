"""Utility helpers for assetpipe core.

- io/: atomic writes and YAML reading
- merge: layered config merging
- paths: project root resolution
- subprocess: external process execution
- stdlib_logging: root logger setup for the CLI
"""
