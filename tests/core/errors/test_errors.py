"""Tests for the error hierarchy."""

import pytest
from loguru import logger

from core.di import Lazy
from core.errors import (
    BoilerplateError,
    ConfigurationError,
    ErrorContext,
    InsecureCorsConfigurationError,
    OptionsBindingError,
    RegistrationClosedError,
    ResolutionError,
    describe_service,
)


class GetThing:
    pass


class TestBoilerplateError:
    """Test suite for the base error."""

    def test_generated_error_code(self):
        """Test that error codes derive from the class name."""
        assert BoilerplateError("boom").error_code == "BOILERPLATE"
        assert OptionsBindingError("bad", section="S").error_code == "OPTIONS_BINDING"

    def test_explicit_error_code(self):
        """Test that an explicit code wins."""
        assert BoilerplateError("boom", error_code="E42").error_code == "E42"

    def test_message_braces_are_safe(self):
        """Test that messages containing braces are logged without formatting."""
        error = BoilerplateError("section {Car} is {broken}")

        assert str(error) == "section {Car} is {broken}"

    def test_with_suggestion(self):
        """Test fluent enrichment of the suggestions."""
        error = BoilerplateError("boom").with_suggestion("Try again").with_suggestion("Or not")

        assert error.context.suggestions == ["Try again", "Or not"]
        assert error.context.user_message == "boom"

    def test_cause_is_recorded(self):
        """Test that a wrapped exception is kept and summarised in the context."""
        inner = ValueError("inner")
        error = ConfigurationError.unreadable_file("settings.yaml", inner)

        assert error.cause is inner
        assert error.context.cause == "ValueError: inner"
        assert error.context.technical_details["config_path"] == "settings.yaml"

    def test_cause_only_shown_when_verbose(self):
        """Test that the CLI rendering hides the cause unless verbose."""
        error = ConfigurationError.unreadable_file("settings.yaml", ValueError("inner"))

        assert "Caused by" not in error.format_for_cli()
        assert "Caused by: ValueError: inner" in error.format_for_cli(verbose=True)

    def test_not_recoverable_logs_critical(self):
        """Test that programming errors are logged at CRITICAL."""
        records = []
        handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
        try:
            RegistrationClosedError(GetThing)
        finally:
            logger.remove(handler_id)

        assert records[-1]["level"].name == "CRITICAL"
        assert records[-1]["extra"]["error_code"] == "DI_REGISTRATION_CLOSED"

    def test_format_for_cli(self):
        """Test CLI rendering with and without details."""
        error = ResolutionError.not_registered(GetThing)

        short = error.format_for_cli()
        verbose = error.format_for_cli(verbose=True)

        assert "No service registered for GetThing" in short
        assert "DI_NOT_REGISTERED" in short
        assert "Suggestions" in short
        assert "service_type" not in short
        assert "service_type: GetThing" in verbose


class TestErrorContext:
    """Test suite for ErrorContext."""

    def test_defaults(self):
        """Test that a fresh context is empty."""
        context = ErrorContext()

        assert context.technical_details == {}
        assert context.suggestions == []
        assert context.cause is None

    def test_given_context_is_used(self):
        """Test that a caller-built context is kept and completed."""
        context = ErrorContext(technical_details={"section": "CorsSettings"})
        error = BoilerplateError("bad section", context=context)

        assert error.context is context
        assert context.user_message == "bad section"


class TestSpecificErrors:
    """Test suite for the specific error types."""

    def test_resolution_errors(self):
        """Test the resolution error factories."""
        assert ResolutionError.not_registered(GetThing).service_type is GetThing
        assert ResolutionError.scope_required(GetThing).error_code == "DI_SCOPE_REQUIRED"
        assert ResolutionError.scope_disposed(GetThing).error_code == "DI_SCOPE_DISPOSED"

    def test_registration_closed_is_not_recoverable(self):
        """Test that late registration is a programming error."""
        error = RegistrationClosedError(GetThing)

        assert not error.recoverable
        assert "GetThing" in error.message

    def test_insecure_cors(self):
        """Test the insecure CORS error."""
        error = InsecureCorsConfigurationError("Open")

        assert not error.recoverable
        assert error.policy_name == "Open"
        assert error.context.technical_details["policy"] == "Open"

    def test_configuration_error_details(self):
        """Test configuration error context."""
        error = ConfigurationError.unsupported_format("settings.toml")

        assert error.error_code == "CONFIG_UNSUPPORTED_FORMAT"
        assert error.context.technical_details["config_path"] == "settings.toml"

    def test_errors_are_boilerplate_errors(self):
        """Test the hierarchy."""
        for error_type in (ConfigurationError, ResolutionError, OptionsBindingError,
                           RegistrationClosedError, InsecureCorsConfigurationError):
            assert issubclass(error_type, BoilerplateError)


class TestDescribeService:
    """Test suite for describe_service."""

    @pytest.mark.parametrize("service_type,expected", [
        (GetThing, "GetThing"),
        (Lazy[GetThing], "Lazy[GetThing]"),
        (dict, "dict"),
    ])
    def test_names(self, service_type, expected):
        """Test readable names of plain and generic identifiers."""
        assert describe_service(service_type) == expected
