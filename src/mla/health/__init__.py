"""Arc health classification and commands."""

from mla.health.checks import ArcHealth, HealthStatus, compute_arc_health, field_coverage, summarize_health

__all__ = ["ArcHealth", "HealthStatus", "compute_arc_health", "field_coverage", "summarize_health"]
