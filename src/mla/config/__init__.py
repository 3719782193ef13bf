"""Project configuration commands."""
