"""Disk image packaging services."""

from .service import APPLICATIONS_LINK, STAGING_DIR, DiskImageService

__all__ = ["APPLICATIONS_LINK", "DiskImageService", "STAGING_DIR"]
