"""yodo -- an endlessly re-rolling feed of odd images with generated captions and themes."""

__version__ = "0.1.0"
