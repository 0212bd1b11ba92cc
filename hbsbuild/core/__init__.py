# hbsbuild/core/__init__.py
"""
Change detection, dependency tracking and the render pipeline.
"""
