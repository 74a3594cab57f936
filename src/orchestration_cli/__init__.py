"""Command line entry point and batch orchestration for video thumbnails."""

__version__ = "0.1.0"
