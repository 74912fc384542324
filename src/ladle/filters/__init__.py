"""Built-in filters.

``DEFAULT_FILTERS`` holds the standard Liquid set; ``JEKYLL_FILTERS`` the
Jekyll extensions. Both are registered on every Environment.
"""

from ladle.filters.jekyll import JEKYLL_FILTERS
from ladle.filters.standard import DEFAULT_FILTERS

__all__ = ["DEFAULT_FILTERS", "JEKYLL_FILTERS"]
