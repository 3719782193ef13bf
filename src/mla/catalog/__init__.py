"""Series, arc and mapping editing commands."""
