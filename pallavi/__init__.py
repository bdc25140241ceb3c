"""Pallavi: career guidance flows over a hosted language model."""

__version__ = "0.1.0"
