"""Dockgen: generate, validate and build Dockerfiles for JavaScript repositories."""

__version__ = "1.0.0"
