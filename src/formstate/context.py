"""Ambient form lookup via ContextVar.

Provides:
- ``form_var``: The active ``Form`` for this task/thread.
- ``provide_form()``: Context manager that makes a form active.
- ``current_form()``: Return the active form or fail loudly.

Passing the form explicitly is always preferred. The ambient lookup is
for deep widget trees that would otherwise thread the form through
every layer::

    with provide_form(form):
        render_profile_section()      # calls current_form() inside

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local otherwise.
    Nested ``provide_form()`` blocks restore the outer form on exit.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from formstate.errors import FormContextError
from formstate.form import Form

form_var: ContextVar[Form[Any]] = ContextVar("formstate_form")
"""The active form. Set by ``provide_form()``."""


@contextmanager
def provide_form[D](form: Form[D]) -> Iterator[Form[D]]:
    """Make *form* the active form for the duration of the block."""
    token = form_var.set(form)
    try:
        yield form
    finally:
        form_var.reset(token)


def current_form() -> Form[Any]:
    """Return the active form.

    Raises ``FormContextError`` (a ``LookupError``) outside ``provide_form()``:
    a missing form is a wiring bug, not a user-input problem.
    """
    try:
        return form_var.get()
    except LookupError:
        msg = "No active form. Wrap the caller in provide_form(form) or pass the form explicitly."
        raise FormContextError(msg) from None
