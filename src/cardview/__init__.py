"""Browse a directory of markdown notes as a filtered, sorted list of cards."""

__version__ = "0.4.0"
