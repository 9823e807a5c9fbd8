"""Per-partition query generation from a caller-supplied query template."""

from .query_template_builder import QueryTemplateBuilder

__all__ = ['QueryTemplateBuilder']
