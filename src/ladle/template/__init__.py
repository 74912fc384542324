"""Compiled templates."""

from ladle.template.core import Template

__all__ = ["Template"]
