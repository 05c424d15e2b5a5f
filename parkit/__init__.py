"""Park-It: parking facility management (vehicle entry, fares, exit)."""

__version__ = "1.0.0"
