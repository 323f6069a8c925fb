# tests/fixtures/__init__.py
"""Shared model definitions for modelize tests.

Available helpers:
- Blog / define_blog: author, profile, comment and post models
"""

from tests.fixtures.blog import Blog, define_blog

__all__ = [
    "Blog",
    "define_blog",
]
