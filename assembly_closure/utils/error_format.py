"""Error display helpers for the CLI.

Module errors are shown as a headline followed by the offending path and the
reader's reason on their own lines, so long paths stay readable.
"""

from __future__ import annotations

from rich.markup import escape as _escape_markup

from ..errors import NotAContainerError
from ..errors import UnreadableModuleError

# Headline per error carrying `path` and `reason`
HEADLINES: dict[type, str] = {
    UnreadableModuleError: "Unable to read module name",
    NotAContainerError: "Not a managed module",
}


def format_error_message(e: BaseException, *, include_type: bool = True) -> str:
    """Format an exception for display.

    Args:
        e: The exception to format
        include_type: Whether to prefix the exception type name

    Returns:
        Display text; module errors span three lines

    Examples:
        >>> format_error_message(UnreadableModuleError("bin/App.dll", "not a PE image"), include_type=False)
        'Unable to read module name\\n  path: bin/App.dll\\n  reason: not a PE image'
    """
    error_type = type(e).__name__

    for exc_type, headline in HEADLINES.items():
        if isinstance(e, exc_type):
            text = f"{headline}\n  path: {e.path}\n  reason: {e.reason}"
            break
    else:
        text = str(e) or error_type

    if include_type and not text.startswith(error_type):
        return f"{error_type}: {text}"
    return text


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings.

    File paths with brackets would otherwise be read as markup tags.
    """
    return _escape_markup(str(value))
