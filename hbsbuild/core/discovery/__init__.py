# hbsbuild/core/discovery/__init__.py
"""
Glob resolution for entry files, helper modules and partials.
"""
from .walker import glob_paths

__all__ = ["glob_paths"]
