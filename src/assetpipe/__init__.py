"""
assetpipe - stylesheet asset preprocessing

Compiles Sass/SCSS sources through an external compiler, keyed by a
fingerprint of the surrounding stylesheet tree, and serves a visible
error stylesheet when compilation fails.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
