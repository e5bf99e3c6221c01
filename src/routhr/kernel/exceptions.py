"""Exception hierarchy for Routhr.

All framework exceptions inherit from RouthrException. Configuration
errors are raised synchronously while the application is being
bootstrapped (route registration, controller resolution, startup) and
are never retried: the same input always produces the same failure.

Categories:
- ConfigurationException: anything wrong with how routes, controllers,
  prefixes or middleware were declared or registered
- RouteRegistrationException: the host server rejected a registration
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class RouthrException(Exception):
    """Base exception for all Routhr errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CONFIG_NO_ROUTES").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(RouthrException):
    """Invalid route, controller, prefix or middleware configuration."""


class MissingParameterException(ConfigurationException):
    """A required argument was not supplied."""


class DuplicateRegistrationException(ConfigurationException):
    """Routes, controllers or the global prefix were registered twice."""


class MiddlewareConflictException(ConfigurationException):
    """A route declares middleware in two mutually exclusive places."""


class UnsupportedMethodException(ConfigurationException):
    """The HTTP method of a route is not one the host server can register."""


class NoRoutesException(ConfigurationException):
    """The application was started without any registered routes."""


class InvalidPrefixExclusionException(ConfigurationException):
    """A global-prefix exclusion entry is missing its path or method."""


class RouteRegistrationException(ConfigurationException):
    """The host server raised while a route or middleware was being registered."""
