"""formstate exception hierarchy.

Validation failures are never exceptions: they are ``FieldError`` /
``FormError`` results. The types here cover wiring bugs only, so every
module raises and catches the same few types.
"""


class FormStateError(Exception):
    """Base for all formstate-specific errors."""


class ConfigurationError(FormStateError):
    """Raised when a lens, rule, or config is constructed with invalid arguments.

    Surfaces at construction time (``FieldLens(id="")``,
    ``min_length(-1)``, ``in_range(10, 1)``), never during validation.
    """


class FormContextError(FormStateError, LookupError):
    """Raised when the active form is requested outside ``provide_form()``.

    Subclasses ``LookupError`` so callers that already guard
    ``ContextVar.get()`` keep working.
    """
