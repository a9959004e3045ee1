"""
Selectors package
-----------------
Translates short selectors ("@alias", "#id", field names) into scoped CSS
and resolves them to elements.
"""

from .resolver import ElementResolver, ID_SHORTCUT

__all__ = [
    "ElementResolver",
    "ID_SHORTCUT",
]
