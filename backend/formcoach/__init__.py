"""Form Coach backend: pose-analysis core and HTTP service."""

__version__ = "1.0.0"
