"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from BBXUserError.

Programming errors and bugs should NOT inherit from BBXUserError:
they will propagate with full tracebacks.
"""

from __future__ import annotations

from typing import Optional


class BBXUserError(Exception):
    """
    Base class for all user-facing errors in bbx.

    These errors indicate problems that the user can fix:
    malformed templates, missing bindings, unreadable variable files.
    """
    pass


class TemplateSyntaxError(BBXUserError):
    """Malformed template syntax, raised while the template is being defined."""

    def __init__(self, message: str, position: int, line: int = 1, column: int = 1):
        self.message = message
        self.position = position
        self.line = line
        self.column = column
        super().__init__(f"{message} at {line}:{column}")


class TemplateBindingError(BBXUserError):
    """An interpolated expression could not be resolved against the bindings."""

    def __init__(self, expression: str, reason: Optional[str] = None):
        self.expression = expression
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot resolve '{expression}'{detail}")


class BindingsLoadError(BBXUserError):
    """Invalid bindings file or --var assignment."""
    pass


__all__ = [
    "BBXUserError",
    "TemplateSyntaxError",
    "TemplateBindingError",
    "BindingsLoadError",
]
