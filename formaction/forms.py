"""Client-side form state and server error application."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

from formaction.models import FlattenedValidationErrors

ROOT = "root"


@dataclass(frozen=True)
class FieldError:
    """Error annotation attached to a field or to the form root."""

    message: str
    type: str = "manual"
    types: Mapping[str, str] = field(default_factory=lambda: {"value": "text"})


class FormState:
    """Field values, error annotations and focus of a single form.

    Fields keep their registration order. Only registered fields can take
    focus; root errors annotate the form without moving focus.
    """

    def __init__(self, default_values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(default_values or {})
        self._errors: dict[str, FieldError] = {}
        self.focused_field: str | None = None

    def register(self, name: str, value: Any = None) -> None:
        self._values.setdefault(name, value)

    @property
    def fields(self) -> tuple[str, ...]:
        return tuple(self._values)

    @property
    def values(self) -> dict[str, Any]:
        return dict(self._values)

    @property
    def errors(self) -> dict[str, FieldError]:
        return dict(self._errors)

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def get_error(self, name: str) -> FieldError | None:
        return self._errors.get(name)

    def set_error(self, name: str, error: FieldError, *, should_focus: bool = False) -> None:
        self._errors[name] = error
        if should_focus and name in self._values:
            self.focused_field = name

    def clear_errors(self, name: str | None = None) -> None:
        if name is None:
            self._errors.clear()
            self.focused_field = None
            return
        self._errors.pop(name, None)
        if name == self.focused_field:
            self.focused_field = None


def _coerce(errors: FlattenedValidationErrors | Mapping[str, Any]) -> FlattenedValidationErrors:
    if isinstance(errors, FlattenedValidationErrors):
        return errors
    return FlattenedValidationErrors.model_validate(errors)


def _field_order(form: FormState, field_errors: Mapping[str, Any]) -> Iterator[str]:
    registered = [name for name in form.fields if name in field_errors]
    yield from registered
    yield from (name for name in field_errors if name not in registered)


def apply_server_errors(
    form: FormState,
    errors: FlattenedValidationErrors | Mapping[str, Any],
) -> None:
    """Apply flattened validation errors to ``form``.

    Root errors go first. Field errors are then written in reverse field
    order so that the first erroneous field is written last and keeps focus.

    Example::

        if not envelope.success:
            apply_server_errors(form, envelope.error)
    """

    flattened = _coerce(errors)

    for message in flattened.form_errors:
        form.set_error(ROOT, FieldError(message=message), should_focus=True)

    field_errors = flattened.field_errors
    for name in reversed(list(_field_order(form, field_errors))):
        messages = field_errors[name]
        if not messages:
            continue
        for message in messages:
            form.set_error(name, FieldError(message=message), should_focus=True)
