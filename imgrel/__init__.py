"""Build container images and push them to a registry."""

__version__ = "0.1.0"
