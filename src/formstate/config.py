"""Form configuration.

FormConfig is a frozen dataclass, immutable after creation and safe to
share between forms.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FormConfig:
    """Form-wide defaults. Immutable after creation.

    Per-field arguments to ``Form.register_field()`` override these::

        config = FormConfig(validate_on_change=False, required_message="Required")
        form = Form(Profile(), config=config)
    """

    # Validation
    validate_on_change: bool = True  # Default for fields registered without an explicit flag
    required_message: str = "Field is required"

    # Aggregate result
    invalid_message: str = "Some fields are not valid"

    # Observation
    stream_queue_size: int = 256  # Per-subscriber buffer for State.stream()
