"""Multi-criteria route planning over a weighted road network."""

__version__ = "0.1.0"
