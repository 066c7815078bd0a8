"""
Centralized error handling for CalcSolver.

Provides a hierarchy of custom exceptions with user-friendly messages,
suggestions for fixes, and error recovery hints.

Numeric sentinels (NaN, infinity) and singular linear systems are NOT
errors; they travel as values and result variants. Only user-input
validation and collaborator failures raise.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, List


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    INFO = auto()  # Informational, operation may have partially succeeded
    WARNING = auto()  # Non-fatal, can continue with degraded functionality
    ERROR = auto()  # Operation failed, but can retry
    CRITICAL = auto()  # Unrecoverable error


@dataclass
class ErrorContext:
    """
    Rich context for error reporting.

    Provides user-friendly information beyond the raw exception.
    """

    title: str  # Short title for dialog/toast
    message: str  # User-friendly message
    technical_details: Optional[str]  # Debug info (shown on expand)
    suggestions: List[str]  # Actionable suggestions
    severity: ErrorSeverity
    recoverable: bool = True  # Can user retry?

    @classmethod
    def from_exception(cls, exc: Exception, context: str = "") -> "ErrorContext":
        """Create ErrorContext from any exception using smart detection."""
        exc_type = type(exc).__name__
        exc_msg = str(exc)

        if isinstance(exc, CalcSolverError):
            return exc.to_context()

        # Number conversion failures from float()
        if isinstance(exc, ValueError) and "could not convert" in exc_msg.lower():
            return cls(
                title="Invalid Number",
                message="A value could not be read as a number.",
                technical_details=f"{exc_type}: {exc_msg}",
                suggestions=[
                    "Use digits, an optional sign and one decimal point",
                    "Remove letters and spaces from numeric fields",
                ],
                severity=ErrorSeverity.ERROR,
            )

        # Network errors from the remote collaborator
        if "timeout" in exc_msg.lower() or "timed out" in exc_msg.lower():
            return cls(
                title="Timeout",
                message="The operation took too long and was cancelled.",
                technical_details=f"{exc_type}: {exc_msg}",
                suggestions=[
                    "Check your network connection",
                    "Try again in a moment",
                ],
                severity=ErrorSeverity.WARNING,
            )

        if isinstance(exc, ImportError):
            return cls(
                title="Missing Dependency",
                message="A required component is not installed.",
                technical_details=f"{exc_type}: {exc_msg}",
                suggestions=[
                    "Check that all dependencies are installed",
                    "Run: pip install -e .[ocr,gui]",
                    "Restart the application",
                ],
                severity=ErrorSeverity.CRITICAL,
                recoverable=False,
            )

        return cls(
            title="Error",
            message=f"An unexpected error occurred: {exc_msg}",
            technical_details=f"{exc_type}: {exc_msg}\nContext: {context}",
            suggestions=["Try again", "Restart the application"],
            severity=ErrorSeverity.ERROR,
        )


class CalcSolverError(Exception):
    """
    Base exception for all CalcSolver errors.

    Subclasses provide rich error context for user-friendly reporting.
    """

    default_title = "Error"
    default_suggestions: List[str] = []
    default_severity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        *,
        suggestions: Optional[List[str]] = None,
        technical_details: Optional[str] = None,
        severity: Optional[ErrorSeverity] = None,
    ):
        super().__init__(message)
        self.user_message = message
        self.suggestions = suggestions or self.default_suggestions.copy()
        self.technical_details = technical_details
        self.severity = severity or self.default_severity

    def to_context(self) -> ErrorContext:
        """Convert to ErrorContext for display."""
        return ErrorContext(
            title=self.default_title,
            message=self.user_message,
            technical_details=self.technical_details,
            suggestions=self.suggestions,
            severity=self.severity,
            recoverable=self.severity != ErrorSeverity.CRITICAL,
        )


# === Input Errors ===


class OCRError(CalcSolverError):
    """Raised when OCR processing fails."""

    default_title = "OCR Error"
    default_suggestions = [
        "Ensure the equation is clearly visible",
        "Use higher contrast (dark text on light background)",
        "Enter the equation manually instead",
    ]


class ParseError(CalcSolverError):
    """Raised when user-entered text cannot be read."""

    default_title = "Parse Error"
    default_suggestions = [
        "Write one equation per line, e.g. '2x+3y=8'",
        "Use x, y and z as the unknowns",
        "Write squares as x^2",
    ]

    def __init__(
        self,
        message: str,
        *,
        text: str = "",
        suggestion: Optional[str] = None,
        **kwargs,
    ):
        suggestions = kwargs.pop("suggestions", None) or self.default_suggestions.copy()
        if suggestion:
            suggestions.insert(0, suggestion)

        super().__init__(message, suggestions=suggestions, **kwargs)
        self.text = text


class InvalidCoefficientError(ParseError):
    """Raised when a coefficient field of the equation form is not a number."""

    default_title = "Invalid Coefficient"

    def __init__(self, value: str, row: int, column: int):
        super().__init__(
            f"Equation {row + 1}, field {column + 1}: '{value}' is not a number",
            text=value,
            suggestions=[
                "Enter a plain number such as 3, -1.5 or 2e3",
                "Every field must be filled in",
            ],
        )
        self.row = row
        self.column = column


class KeyTokenError(ParseError):
    """Raised when a calculator key label is not part of the keypad."""

    default_title = "Unknown Key"

    def __init__(self, token: str):
        super().__init__(
            f"'{token}' is not a calculator key",
            text=token,
            suggestions=[
                "Separate keys with spaces, e.g. '2 + 3 ='",
                "Function keys use their labels, e.g. 'sin', 'x²', 'x!'",
            ],
        )


# === Solver Errors ===


class SolveError(CalcSolverError):
    """Raised when equation solving fails."""

    default_title = "Solve Error"
    default_suggestions = [
        "Check that the equation is valid",
        "Simplify the equation if possible",
    ]


class UnrecognizedEquationError(SolveError):
    """Raised by callers that require a recognized equation family."""

    default_title = "Unrecognized Equation"
    default_severity = ErrorSeverity.WARNING
    default_suggestions = [
        "Supported: linear systems with 2 or 3 unknowns, one linear equation in x, "
        "and quadratics in x",
        "Put each equation of a system on its own line",
    ]

    def __init__(self, text: str):
        super().__init__(
            "The equation format was not recognized",
            technical_details=f"Input: {text!r}",
        )


class SingularSystemError(SolveError):
    """Raised by callers that need a unique solution and did not get one."""

    default_title = "No Unique Solution"
    default_severity = ErrorSeverity.WARNING

    def __init__(self, size: int):
        super().__init__(
            f"The {size}x{size} system has no unique solution",
            suggestions=[
                "Check whether two equations are multiples of each other",
                "Check for an equation whose coefficients are all zero",
            ],
        )


# === Remote analysis errors ===


class RemoteAnalysisError(CalcSolverError):
    """Base for failures of the remote photo-analysis service."""

    default_title = "Photo Analysis Error"
    default_suggestions = [
        "Try again in a moment",
        "Type the equation in manually instead",
    ]


class MissingAPIKeyError(RemoteAnalysisError):
    """Raised when no API key is configured for the remote service."""

    default_title = "Missing API Key"

    def __init__(self, env_var: str = "GEMINI_API_KEY"):
        super().__init__(
            f"No API key configured. Set the {env_var} environment variable.",
            suggestions=[f"export {env_var}=<your key>"],
        )


class InvalidResponseError(RemoteAnalysisError):
    """Raised when the service answers with content that cannot be decoded."""

    default_title = "Invalid Response"

    def __init__(self, details: Optional[str] = None):
        super().__init__(
            "The photo analysis service returned a response that could not be read.",
            technical_details=details,
        )


class RemoteServiceError(RemoteAnalysisError):
    """Raised when the service reports an error."""

    default_title = "Service Error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(f"The photo analysis service reported an error: {message}")
        self.service_message = message
        self.status_code = status_code


# === Utility functions ===


def format_error_for_user(exc: Exception, context: str = "") -> str:
    """
    Format an exception into a user-friendly string.

    Returns a single string suitable for status bar or simple display.
    """
    ctx = ErrorContext.from_exception(exc, context)

    result = ctx.message
    if ctx.suggestions:
        result += f" Try: {ctx.suggestions[0]}"

    return result


def format_error_for_dialog(exc: Exception, context: str = "") -> dict:
    """
    Format an exception into a dict suitable for QMessageBox.

    Returns dict with 'title', 'text', 'detailed_text', 'icon' keys.
    """
    from PyQt6.QtWidgets import QMessageBox

    ctx = ErrorContext.from_exception(exc, context)

    detailed_parts = []
    if ctx.suggestions:
        detailed_parts.append("Suggestions:")
        for i, sugg in enumerate(ctx.suggestions, 1):
            detailed_parts.append(f"  {i}. {sugg}")
    if ctx.technical_details:
        detailed_parts.append("")
        detailed_parts.append("Technical details:")
        detailed_parts.append(ctx.technical_details)

    icon_map = {
        ErrorSeverity.INFO: QMessageBox.Icon.Information,
        ErrorSeverity.WARNING: QMessageBox.Icon.Warning,
        ErrorSeverity.ERROR: QMessageBox.Icon.Critical,
        ErrorSeverity.CRITICAL: QMessageBox.Icon.Critical,
    }

    return {
        "title": ctx.title,
        "text": ctx.message,
        "detailed_text": "\n".join(detailed_parts) if detailed_parts else None,
        "icon": icon_map.get(ctx.severity, QMessageBox.Icon.Warning),
    }
