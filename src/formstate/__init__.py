"""formstate — reactive form state and validation for immutable data models.

Tracks per-field values, validation results, and dirty/touched flags, and
aggregates them into a form-level result. Rendering is left to the UI
layer, which binds inputs to fields and observes their state.

Basic usage::

    from dataclasses import dataclass
    from formstate import Form, attr_lens, in_range, min_length

    @dataclass(frozen=True)
    class Signup:
        name: str = ""
        age: int = 0

    Name = attr_lens("name")
    Age = attr_lens("age")

    form = Form(Signup(), on_submit=save)
    form.register_field(Name, [min_length(3)], required=True)
    form.register_field(Age, [in_range(18, 120)])

    form.on_change(Name, "Alice")
    form.on_change(Age, 30)
    form.submit()  # Valid -> save(Signup(name="Alice", age=30))
"""

__version__ = "0.1.0-dev"
__all__ = [
    "NO_INPUT",
    "SUCCESS",
    "VALID",
    "ConfigurationError",
    "Field",
    "FieldError",
    "FieldLens",
    "FieldResult",
    "FieldState",
    "Form",
    "FormConfig",
    "FormContextError",
    "FormError",
    "FormResult",
    "FormStateError",
    "NoInput",
    "Observable",
    "State",
    "Success",
    "Valid",
    "ValidationRule",
    "attr_lens",
    "batch",
    "bind_field",
    "checked",
    "current_form",
    "email",
    "field_state",
    "in_range",
    "key_lens",
    "max_length",
    "max_value",
    "min_length",
    "min_value",
    "not_blank",
    "not_empty",
    "provide_form",
    "required",
    "set_presence",
    "strong_password",
    "url",
    "validate_only_if",
]

_RULES = (
    "ValidationRule",
    "checked",
    "email",
    "in_range",
    "max_length",
    "max_value",
    "min_length",
    "min_value",
    "not_blank",
    "not_empty",
    "required",
    "strong_password",
    "url",
    "validate_only_if",
)

_RESULTS = (
    "NO_INPUT",
    "SUCCESS",
    "VALID",
    "FieldError",
    "FieldResult",
    "FormError",
    "FormResult",
    "NoInput",
    "Success",
    "Valid",
)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import formstate`` fast while providing a clean top-level API.
    """
    if name == "Form":
        from formstate.form import Form

        return Form

    if name == "Field":
        from formstate.field import Field

        return Field

    if name == "FormConfig":
        from formstate.config import FormConfig

        return FormConfig

    if name in ("FieldLens", "attr_lens", "key_lens"):
        from formstate import lens as _lens

        return getattr(_lens, name)

    if name in _RESULTS:
        from formstate import results as _results

        return getattr(_results, name)

    if name in _RULES:
        from formstate import rules as _rules

        return getattr(_rules, name)

    if name in ("Observable", "State", "batch"):
        from formstate import observable as _obs

        return getattr(_obs, name)

    if name in ("FieldState", "bind_field", "field_state", "set_presence"):
        from formstate import binding as _binding

        return getattr(_binding, name)

    if name in ("current_form", "provide_form"):
        from formstate import context as _ctx

        return getattr(_ctx, name)

    if name in ("ConfigurationError", "FormContextError", "FormStateError"):
        from formstate import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
