"""Release-flavor CI helper: scope checks and pipeline generation."""

__version__ = "0.4.0"
