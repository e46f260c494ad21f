"""Autoroute error hierarchy.

All autoroute-specific errors inherit from AutorouteError for easy catching.
"""


class AutorouteError(Exception):
    """Base error for all autoroute operations."""


class ConfigError(AutorouteError):
    """Invalid or missing configuration."""


class RouteNameError(AutorouteError):
    """A route file name does not follow the ``method-fragment`` grammar."""


class LoadError(AutorouteError):
    """A route module could not be imported."""
