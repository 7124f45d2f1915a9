"""Stylesheet commands."""
