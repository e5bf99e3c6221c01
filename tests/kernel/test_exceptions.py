"""Tests for the Routhr exception hierarchy."""

import pytest

from routhr.kernel.exceptions import (
    ConfigurationException,
    DuplicateRegistrationException,
    InvalidPrefixExclusionException,
    MiddlewareConflictException,
    MissingParameterException,
    NoRoutesException,
    RouteRegistrationException,
    RouthrException,
    UnsupportedMethodException,
)


class TestRouthrException:
    def test_basic_creation(self):
        exc = RouthrException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = RouthrException("bad route", code="CONFIG_MISSING_PARAMETER", context={"path": "/a"})
        assert exc.code == "CONFIG_MISSING_PARAMETER"
        assert exc.context["path"] == "/a"

    def test_context_not_shared(self):
        exc = RouthrException("a")
        exc.context["key"] = "value"
        assert RouthrException("b").context == {}


class TestExceptionHierarchy:
    @pytest.mark.parametrize(
        "exc_type",
        [
            MissingParameterException,
            DuplicateRegistrationException,
            MiddlewareConflictException,
            UnsupportedMethodException,
            NoRoutesException,
            InvalidPrefixExclusionException,
            RouteRegistrationException,
        ],
    )
    def test_configuration_errors(self, exc_type):
        assert issubclass(exc_type, ConfigurationException)

    def test_configuration_is_routhr(self):
        assert issubclass(ConfigurationException, RouthrException)

    def test_catch_by_base(self):
        with pytest.raises(ConfigurationException):
            raise NoRoutesException("No routes have been registered.")
