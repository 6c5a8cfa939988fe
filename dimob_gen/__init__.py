"""dimob-gen: annual fiscal declaration (DIMOB) file generator for rental management."""

__version__ = "0.1.0"
