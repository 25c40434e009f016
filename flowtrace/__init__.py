"""Session recording and structural diff compression."""

__version__ = "0.1.0"
