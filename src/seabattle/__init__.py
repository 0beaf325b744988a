"""Single-player Battleship against a hunt-and-destroy computer opponent."""

__version__ = "0.1.0"
