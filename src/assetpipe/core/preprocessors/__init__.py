"""Asset preprocessors and the pipeline that drives them."""
from __future__ import annotations

from .base import Artifact, Preprocessor
from .fingerprint import dependency_set, fingerprint
from .pipeline import Pipeline, PreprocessorRegistry, build_default_pipeline
from .sass import SassPreprocessor, SassSettings

__all__ = [
    "Artifact",
    "Preprocessor",
    "dependency_set",
    "fingerprint",
    "Pipeline",
    "PreprocessorRegistry",
    "build_default_pipeline",
    "SassPreprocessor",
    "SassSettings",
]
