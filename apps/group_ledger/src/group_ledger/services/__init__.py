"""Application services built on top of the settlement engine."""
