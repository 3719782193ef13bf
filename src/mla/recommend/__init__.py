"""Triage buckets: gaps, mismatches and top-rated arcs."""

from mla.recommend.ranker import RankedArc, Recommendations, rank_arcs

__all__ = ["RankedArc", "Recommendations", "rank_arcs"]
