"""Bundle assembly services."""

from .service import TEMPLATE_FILE, BundleService, PreparedBundle

__all__ = ["BundleService", "PreparedBundle", "TEMPLATE_FILE"]
