"""formfill: tabular data normalization and template field mapping for batch form filling."""

__version__ = "0.1.0"
