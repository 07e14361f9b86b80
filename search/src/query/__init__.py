"""Filter tag translation into S3 Select expressions."""

from .builder import TAG_RULES, build_expression, build_predicate

__all__ = ["TAG_RULES", "build_predicate", "build_expression"]
