"""Core utilities for podcast_feed_parser.

This module provides:
- Lenient number and date parsing for feed text values
"""

from .parsing import parse_feed_date, parse_float_prefix, parse_int_prefix

__all__ = [
    "parse_feed_date",
    "parse_float_prefix",
    "parse_int_prefix",
]
