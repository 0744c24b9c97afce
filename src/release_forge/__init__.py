"""release-forge: build container images and release them to Cloud Run."""

__version__ = "0.1.0"
