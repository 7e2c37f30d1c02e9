"""Info.plist variables and template rendering."""

from . import constants
from .template import PlistTemplate, render_line
from .variables import project_defaults, resolve_variables

__all__ = [
    "PlistTemplate",
    "constants",
    "project_defaults",
    "render_line",
    "resolve_variables",
]
