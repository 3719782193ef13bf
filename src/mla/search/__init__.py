"""Substring search across series, arcs and mappings."""

from mla.search.index import DEFAULT_RESULT_LIMIT, Match, normalize_term, search

__all__ = ["DEFAULT_RESULT_LIMIT", "Match", "normalize_term", "search"]
