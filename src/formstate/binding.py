"""Helpers for UI-binding collaborators.

Nothing here renders. These are the calls a binding layer makes on every
render pass:

- ``bind_field()``: register once, reuse the registration on re-entry.
- ``field_state()``: a frozen snapshot of a field plus its two actions.
- ``set_presence()``: show/hide a conditionally rendered field without
  losing its registration.

Usage::

    field = bind_field(form, Email, [email()], required=True)

    state = field_state(form, Email)
    if state is not None and state.error:
        show_error(state.error)

    set_presence(form, CompanyName, present=is_business, clear_on_hide=True)
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from formstate.field import Field
from formstate.form import Form
from formstate.lens import FieldLens
from formstate.observable import batch
from formstate.results import FieldResult
from formstate.rules import ValidationRule


@dataclass(frozen=True, slots=True)
class FieldState[V]:
    """Snapshot of a registered field's state and actions.

    Rebuild it whenever the underlying field publishes a change; the
    snapshot itself never updates.
    """

    value: V | None
    error: str | None
    touched: bool
    dirty: bool
    enabled: bool
    on_change: Callable[[V | None], None]
    validate: Callable[[], bool]


def bind_field[D, V](
    form: Form[D],
    lens: FieldLens[D, V],
    validators: Iterable[ValidationRule[V]] = (),
    custom_validation: Callable[[V], FieldResult] | None = None,
    validate_on_change: bool | None = None,
    *,
    required: bool = False,
    required_error: str | None = None,
) -> Field[V]:
    """Return the field registered for *lens*, registering it on first use.

    Unlike ``Form.register_field()``, an existing registration is kept as
    is, so repeated render passes do not discard field state.
    """
    existing = form.get_registered_field(lens)
    if existing is not None:
        return existing
    return form.register_field(
        lens,
        validators,
        custom_validation,
        validate_on_change,
        required=required,
        required_error=required_error,
    )


def field_state[D, V](form: Form[D], lens: FieldLens[D, V]) -> FieldState[V] | None:
    """Snapshot the field registered for *lens*, or ``None`` if unregistered.

    Does not register the field.
    """
    field = form.get_registered_field(lens)
    if field is None:
        return None

    def on_change(value: V | None) -> None:
        form.on_change(lens, value)

    return FieldState(
        value=field.value,
        error=field.error,
        touched=field.touched,
        dirty=field.dirty,
        enabled=field.enabled,
        on_change=on_change,
        validate=field.is_valid,
    )


def set_presence(form: Form[Any], lens: FieldLens[Any, Any], present: bool, *, clear_on_hide: bool = False) -> None:
    """Enable or disable a conditionally shown field.

    Hidden fields validate to ``Success``. With *clear_on_hide*, hiding
    also sends ``None`` through ``form.on_change()``, clearing the field
    value and (when the lens can clear) the data slice. Unregistered
    lenses are ignored.
    """
    field = form.get_registered_field(lens)
    if field is None:
        return
    with batch():
        field.set_enabled(present)
        if not present and clear_on_hide:
            form.on_change(lens, None)
