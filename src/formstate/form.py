"""Form — aggregate root owning the data snapshot and the field registry.

The form holds an immutable data snapshot ``D`` and a registry of
``(lens, field)`` pairs keyed by lens id. Edits flow through the form::

    form = Form(Profile(name="", age=0), on_submit=save)
    name = form.register_field(Name, [min_length(3)], required=True)
    age = form.register_field(Age, [in_range(18, 120)])

    form.on_change(Name, "Alice")   # field state + new snapshot
    form.on_change(Age, 30)
    form.submit()                   # Valid -> save(Profile("Alice", 30))

``on_change()`` never blocks on validity: the field records the value
(and validates if configured) and the snapshot is rebuilt through the
lens, valid or not. ``validate()`` runs every field without short-circuiting
across fields and collects one message per failing field id.

Every mutating operation commits inside ``batch()``, so subscribers of
``data_state``/``result_state`` and of each field only run once all
derived state is consistent.

Lookups and edits with a lens that was never registered are no-ops on
field state; they never raise.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any, cast

from formstate.config import FormConfig
from formstate.field import Field
from formstate.lens import FieldLens
from formstate.observable import Observable, State, batch
from formstate.results import NO_INPUT, VALID, FieldError, FieldResult, FormError, FormResult, Valid
from formstate.rules import ValidationRule

logger = logging.getLogger("formstate.form")


class Form[D]:
    """Form state: data snapshot, field registry, aggregate result."""

    __slots__ = ("_data", "_fields", "_on_submit", "_result", "config", "initial_data")

    def __init__(
        self,
        initial_data: D,
        on_submit: Callable[[D], Any] | None = None,
        *,
        config: FormConfig | None = None,
    ) -> None:
        self.config = config or FormConfig()
        self.initial_data = initial_data
        self._on_submit = on_submit
        queue_size = self.config.stream_queue_size
        self._data: State[D] = State(initial_data, name="form.data", queue_size=queue_size)
        self._result: State[FormResult] = State(NO_INPUT, name="form.result", queue_size=queue_size)
        # lens id -> (lens, field); insertion order is validation order
        self._fields: dict[str, tuple[FieldLens[D, Any], Field[Any]]] = {}

    # -- Observable state --

    @property
    def data_state(self) -> Observable[D]:
        return self._data

    @property
    def result_state(self) -> Observable[FormResult]:
        return self._result

    @property
    def data(self) -> D:
        """The current committed snapshot."""
        return self._data.value

    @property
    def result(self) -> FormResult:
        return self._result.value

    @property
    def fields(self) -> Mapping[str, Field[Any]]:
        """Read-only view of registered fields by id, in registration order."""
        return MappingProxyType({key: field for key, (_, field) in self._fields.items()})

    # -- Registration --

    def register_field[V](
        self,
        lens: FieldLens[D, V],
        validators: Iterable[ValidationRule[V]] = (),
        custom_validation: Callable[[V], FieldResult] | None = None,
        validate_on_change: bool | None = None,
        *,
        required: bool = False,
        required_error: str | None = None,
    ) -> Field[V]:
        """Create a field seeded from the current snapshot and register it.

        Registering an id again replaces the previous slot with a fresh
        field seeded from the current data; the old field is detached.
        """
        if lens.id in self._fields:
            logger.debug("Re-registering field %r; previous registration replaced", lens.id)
        field: Field[V] = Field(
            lens.get(self._data.value),
            validators=validators,
            custom_validation=custom_validation,
            validate_on_change=(
                self.config.validate_on_change if validate_on_change is None else validate_on_change
            ),
            required=required,
            required_error=self.config.required_message if required_error is None else required_error,
            id=lens.id,
            queue_size=self.config.stream_queue_size,
        )
        self._fields[lens.id] = (lens, field)
        return field

    def get_registered_field[V](self, lens: FieldLens[D, V]) -> Field[V] | None:
        """Return the field registered under ``lens.id``, or ``None``."""
        entry = self._fields.get(lens.id)
        if entry is None:
            return None
        return cast(Field[V], entry[1])

    def is_registered(self, lens: FieldLens[D, Any]) -> bool:
        return lens.id in self._fields

    # -- Mutation --

    def on_change[V](self, lens: FieldLens[D, V], value: V | None) -> None:
        """Forward *value* to the field and commit a new snapshot.

        ``None`` commits ``lens.clear(data)`` when the lens has a clear
        function and leaves the snapshot untouched otherwise.
        """
        with batch():
            field = self.get_registered_field(lens)
            if field is not None:
                field.on_change(value)
            else:
                logger.debug("on_change for unregistered field %r; updating data only", lens.id)

            data = self._data.value
            if value is not None:
                self._data.set(lens.set(data, value))
            elif lens.clear is not None:
                self._data.set(lens.clear(data))

    def clear(self, lens: FieldLens[D, Any]) -> None:
        """Commit ``lens.clear(data)``. Field state is left as it is.

        Follow with ``sync_from_data()`` or ``field.reset()`` if the field
        should reflect the cleared value.
        """
        if lens.clear is None:
            logger.debug("clear() on field %r without a clear function; ignored", lens.id)
            return
        self._data.set(lens.clear(self._data.value))

    def sync_from_data(self) -> None:
        """Reset every field from the current snapshot; result back to ``NoInput``."""
        with batch():
            data = self._data.value
            for lens, field in list(self._fields.values()):
                field.reset(lens.get(data))
            self._result.set(NO_INPUT)

    def load_data(self, data: D) -> None:
        """Replace the snapshot wholesale (e.g. a loaded draft) and resync fields."""
        with batch():
            self._data.set(data)
            self.sync_from_data()

    # -- Validation --

    def validate(self) -> FormResult:
        """Validate every field and publish the aggregate result."""
        field_errors: dict[str, str] = {}
        with batch():
            for key, (_, field) in list(self._fields.items()):
                outcome = field.validate()
                if isinstance(outcome, FieldError):
                    field_errors[key] = outcome.message

            result: FormResult
            if field_errors:
                result = FormError(message=self.config.invalid_message, field_errors=field_errors)
            else:
                result = VALID
            self._result.set(result)
        return result

    def is_valid(self) -> bool:
        """Validate and report whether the aggregate result is ``Valid``."""
        return isinstance(self.validate(), Valid)

    def submit(self) -> FormResult:
        """Validate; when ``Valid``, call ``on_submit`` with the current snapshot.

        Returns the validation result either way.
        """
        result = self.validate()
        if isinstance(result, Valid):
            if self._on_submit is not None:
                self._on_submit(self._data.value)
        elif isinstance(result, FormError):
            logger.debug("Submit skipped; invalid fields: %s", ", ".join(result.field_errors))
        return result

    # -- Queries --

    def value_of[V](self, lens: FieldLens[D, V]) -> V:
        """Read *lens* from the current snapshot (not from the field)."""
        return lens.get(self._data.value)

    def close(self) -> None:
        """End every active ``stream()`` on the form and its fields."""
        self._data.close()
        self._result.close()
        for _, field in self._fields.values():
            field.close()

    def __repr__(self) -> str:
        return f"Form(fields={list(self._fields)!r}, result={self.result!r})"
