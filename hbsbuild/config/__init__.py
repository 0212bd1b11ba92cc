"""
Configuration for hbsbuild: the builder options dataclasses and the TOML
loader used by the command line interface.
"""
from .settings import BuildConfig, BuildHooks, DEFAULT_OUTPUT_DIR

__all__ = ["BuildConfig", "BuildHooks", "DEFAULT_OUTPUT_DIR"]
