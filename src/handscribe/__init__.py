"""handscribe — reconstruct poker hands and emit canonical hand histories."""

__version__ = "0.1.0"
