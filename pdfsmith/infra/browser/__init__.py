"""Browser provisioning."""

from .locator import find_or_download

__all__ = ["find_or_download"]
