"""CLI command modules for the two pipeline stages.

- build: build and push the image, or just print its URL
- release: deploy an image to an environment, or print its configuration
"""

from .build import build, image_url
from .release import release, show_config

__all__ = ["build", "image_url", "release", "show_config"]
