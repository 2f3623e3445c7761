"""Text rendering for settlement outcomes."""
