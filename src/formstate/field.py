"""Field — reactive state and validation pipeline for one form input.

A field owns one value slot plus derived state, each held in an
observable ``State``:

- ``value``: current value (``None`` means absent).
- ``error``: message of the last ``FieldError``, else ``None``.
- ``result``: last validation outcome, ``NoInput`` until validated.
- ``touched``: set by the first ``on_change()``, cleared only by ``reset()``.
- ``dirty``: current value differs from the baseline (``initial``).
- ``enabled``: when ``False`` the field always validates to ``Success``.

Validation pipeline (``validate()``), short-circuiting:

1. Disabled → ``Success``; no rule runs.
2. ``None`` value → ``FieldError(required_error)`` if required, else
   ``Success`` without running any rule.
3. Validators, in registration order; the first ``FieldError`` wins.
4. Custom validation, only if every validator passed.

Fields are normally created by ``Form.register_field()``, which seeds the
value through the lens. They can also be used standalone::

    name = Field("", validators=[min_length(3)], required=True)
    name.on_change("Al")
    name.error  # "Must be at least 3 characters long."
"""

from collections.abc import Callable, Iterable

from formstate.observable import Observable, State, batch
from formstate.results import NO_INPUT, SUCCESS, FieldError, FieldResult, NoInput, Success
from formstate.rules import ValidationRule

DEFAULT_REQUIRED_MESSAGE = "Field is required"


class Field[V]:
    """Reactive state container for one form input."""

    __slots__ = (
        "_custom_validation",
        "_dirty",
        "_enabled",
        "_error",
        "_initial",
        "_result",
        "_touched",
        "_value",
        "id",
        "required",
        "required_error",
        "validate_on_change",
        "validators",
    )

    def __init__(
        self,
        initial: V | None,
        *,
        validators: Iterable[ValidationRule[V]] = (),
        custom_validation: Callable[[V], FieldResult] | None = None,
        validate_on_change: bool = True,
        required: bool = False,
        required_error: str | None = None,
        id: str = "",
        queue_size: int = 256,
    ) -> None:
        self.id = id
        self.validators: tuple[ValidationRule[V], ...] = tuple(validators)
        self._custom_validation = custom_validation
        self.validate_on_change = validate_on_change
        self.required = required
        self.required_error = DEFAULT_REQUIRED_MESSAGE if required_error is None else required_error
        self._initial = initial

        label = id or "field"
        self._value: State[V | None] = State(initial, name=f"{label}.value", queue_size=queue_size)
        self._error: State[str | None] = State(None, name=f"{label}.error", queue_size=queue_size)
        self._result: State[FieldResult] = State(NO_INPUT, name=f"{label}.result", queue_size=queue_size)
        self._touched: State[bool] = State(False, name=f"{label}.touched", queue_size=queue_size)
        self._dirty: State[bool] = State(False, name=f"{label}.dirty", queue_size=queue_size)
        self._enabled: State[bool] = State(True, name=f"{label}.enabled", queue_size=queue_size)

    # -- Observable state --

    @property
    def value_state(self) -> Observable[V | None]:
        return self._value

    @property
    def error_state(self) -> Observable[str | None]:
        return self._error

    @property
    def result_state(self) -> Observable[FieldResult]:
        return self._result

    @property
    def touched_state(self) -> Observable[bool]:
        return self._touched

    @property
    def dirty_state(self) -> Observable[bool]:
        return self._dirty

    @property
    def enabled_state(self) -> Observable[bool]:
        return self._enabled

    # -- Current values --

    @property
    def value(self) -> V | None:
        return self._value.value

    @property
    def error(self) -> str | None:
        return self._error.value

    @property
    def result(self) -> FieldResult:
        return self._result.value

    @property
    def touched(self) -> bool:
        return self._touched.value

    @property
    def dirty(self) -> bool:
        return self._dirty.value

    @property
    def enabled(self) -> bool:
        return self._enabled.value

    @property
    def initial(self) -> V | None:
        """Baseline for ``dirty``: the construction or last ``reset()`` value."""
        return self._initial

    # -- Operations --

    def on_change(self, value: V | None) -> None:
        """Record a user edit; validate immediately if ``validate_on_change``."""
        with batch():
            self._touched.set(True)
            self._dirty.set(value != self._initial)
            self._value.set(value)
            if self.validate_on_change:
                self.validate()

    def validate(self) -> FieldResult:
        """Run the pipeline against the current value and publish the outcome."""
        outcome = self._run_pipeline(self._value.value)
        with batch():
            self._result.set(outcome)
            self._error.set(outcome.message if isinstance(outcome, FieldError) else None)
        return outcome

    def is_valid(self) -> bool:
        """Validate and report whether the outcome is ``Success``."""
        return isinstance(self.validate(), Success)

    def set_enabled(self, enabled: bool) -> None:
        """Toggle validation. Does not re-validate; call ``validate()`` for that."""
        self._enabled.set(enabled)

    def reset(self, initial: V | None) -> None:
        """Adopt *initial* as both value and baseline; clear result and flags."""
        with batch():
            self._initial = initial
            self._value.set(initial)
            self._result.set(NO_INPUT)
            self._error.set(None)
            self._touched.set(False)
            self._dirty.set(False)

    def close(self) -> None:
        """End every active ``stream()`` on this field's states."""
        for state in (self._value, self._error, self._result, self._touched, self._dirty, self._enabled):
            state.close()

    def _run_pipeline(self, value: V | None) -> FieldResult:
        if not self._enabled.value:
            return SUCCESS

        if value is None:
            if self.required:
                return FieldError(self.required_error)
            return SUCCESS

        for rule in self.validators:
            outcome = rule(value)
            if isinstance(outcome, FieldError):
                return outcome

        if self._custom_validation is not None:
            outcome = self._custom_validation(value)
            if not isinstance(outcome, NoInput):
                return outcome

        return SUCCESS

    def __repr__(self) -> str:
        return f"Field({self.id!r}, value={self.value!r}, result={self.result!r})"
