"""Random minimizers of DNA sequences: k-mer hashing, sliding window minima and minimizer schemes."""

__version__ = "0.1.0"
__all__ = ["counting", "elements", "hashing", "minimizers", "windows"]