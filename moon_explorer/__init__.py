"""Moon Explorer: lunar terrain, annotation and trajectory core."""

__version__ = "0.1.0"
