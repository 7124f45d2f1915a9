"""Shared helpers for the assetpipe test suite."""
