"""
utils - Utility Functions Package

This package contains helper functions used across the application:
- validators: Lenient query parameter parsing
"""

from utils.validators import INT64_MAX, INT64_MIN, parse_int, parse_int64, clamp, clean_values

__all__ = [
    "INT64_MAX",
    "INT64_MIN",
    "parse_int",
    "parse_int64",
    "clamp",
    "clean_values",
]
