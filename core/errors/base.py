"""Base error type of the API boilerplate.

Every error raised by the composition root carries a pydantic
:class:`ErrorContext` with the details an operator needs (which service,
which section, which file) and the suggestions the CLI prints.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, TypeVar

from loguru import logger
from pydantic import BaseModel, Field

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


class ErrorContext(BaseModel):
    """Details attached to a :class:`BoilerplateError`."""

    user_message: Optional[str] = None
    technical_details: Dict[str, Any] = Field(default_factory=dict)
    suggestions: List[str] = Field(default_factory=list)
    cause: Optional[str] = None

    def add_suggestion(self, suggestion: str) -> None:
        self.suggestions.append(suggestion)

    def add_technical_detail(self, key: str, value: Any) -> None:
        self.technical_details[key] = value


T = TypeVar("T", bound="BoilerplateError")


class BoilerplateError(Exception):
    """Base exception of the composition root.

    The error is logged once when it is created: recoverable errors at
    ``ERROR``, programming errors (``recoverable=False``) at ``CRITICAL``.
    """

    def __init__(
        self,
        message: str,
        *,
        context: Optional[ErrorContext] = None,
        cause: Optional[BaseException] = None,
        error_code: Optional[str] = None,
        recoverable: bool = True,
    ):
        """Initialize error.

        Args:
            message: Human-readable error message
            context: Details collected by the raiser, a fresh one when omitted
            cause: Exception this error wraps
            error_code: Code for programmatic handling, derived from the class name when omitted
            recoverable: Whether the host can carry on after this error
        """
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.error_code = error_code or self._generate_error_code()
        self.recoverable = recoverable

        self.context = context or ErrorContext()
        self.context.user_message = message
        if cause is not None:
            self.context.cause = f"{type(cause).__name__}: {cause}"

        self._log_error()

    def _generate_error_code(self) -> str:
        # OptionsBindingError -> OPTIONS_BINDING
        name = self.__class__.__name__
        if name.endswith("Error"):
            name = name[: -len("Error")]
        return _CAMEL_BOUNDARY.sub("_", name).upper()

    def _log_error(self) -> None:
        log_data: Dict[str, Any] = {"error_code": self.error_code, "recoverable": self.recoverable}
        if self.context.technical_details:
            log_data["details"] = self.context.technical_details

        # bind() keeps braces in the message away from loguru's formatter
        bound = logger.bind(**log_data)
        if self.recoverable:
            bound.error(self.message)
        else:
            bound.critical(self.message)

    def with_suggestion(self: T, suggestion: str) -> T:
        """Add a suggestion for resolving the error."""
        self.context.add_suggestion(suggestion)
        return self

    def format_for_cli(self, verbose: bool = False) -> str:
        """Render the error as rich markup for the CLI.

        Suggestions are always shown. Technical details and the wrapped
        cause are only shown when ``verbose`` is set.
        """
        lines = [
            f"[red]Error[/red]: {self.message}",
            f"[dim]Code: {self.error_code}[/dim]",
        ]

        if self.context.suggestions:
            lines.append("\n[yellow]Suggestions:[/yellow]")
            lines.extend(f"  • {suggestion}" for suggestion in self.context.suggestions)

        if verbose:
            if self.context.technical_details:
                lines.append("\n[dim]Technical Details:[/dim]")
                lines.extend(f"  {key}: {value}" for key, value in self.context.technical_details.items())
            if self.context.cause:
                lines.append(f"\n[dim]Caused by: {self.context.cause}[/dim]")

        return "\n".join(lines)
