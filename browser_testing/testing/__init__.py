# browser_testing/testing/__init__.py
"""
Testing package
---------------
pytest integration: the browser provider and the fixtures built on it.
"""

from .provider import BrowserProvider, browsers_needed_for

__all__ = [
    "BrowserProvider",
    "browsers_needed_for",
]
