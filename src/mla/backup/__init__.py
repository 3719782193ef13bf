"""Snapshot backup commands."""
