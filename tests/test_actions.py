import asyncio
import logging

import pytest
from pydantic import BaseModel, ValidationError, model_validator

from formaction.actions import action, server_action, server_form_action
from formaction.exceptions import INTERNAL_ERROR_MESSAGE, InternalServerError
from formaction.models import InternalFailure, Success, ValidationFailure, dump_envelope
from formaction.schemas import CreateUserDTO

VALID_INPUT = {"name": "Ada Lovelace", "email": "ada@example.com", "age": "36"}
SECRET = "db password is hunter2"


class Recorder:
    """Processing function that records every call."""

    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.calls: list[BaseModel] = []
        self._result = result
        self._error = error

    async def __call__(self, payload: BaseModel):
        self.calls.append(payload)
        if self._error is not None:
            raise self._error
        return self._result


class Passwords(BaseModel):
    password: str
    confirm: str

    @model_validator(mode="after")
    def passwords_match(self) -> "Passwords":
        if self.password != self.confirm:
            raise ValueError("Passwords do not match")
        return self


@pytest.mark.asyncio
async def test_action_success_returns_data_verbatim() -> None:
    data = {"id": 7, "nested": ["a", "b"]}
    process = Recorder(result=data)

    result = await action(CreateUserDTO, process, clock=lambda: 1712325980344)(VALID_INPUT)

    assert isinstance(result, Success)
    assert result.success is True
    assert result.data is data
    assert result.timestamp == 1712325980344
    assert "error" not in dump_envelope(result)


@pytest.mark.asyncio
async def test_action_calls_process_once_with_coerced_input() -> None:
    process = Recorder(result={})

    await action(CreateUserDTO, process)(VALID_INPUT)

    assert len(process.calls) == 1
    payload = process.calls[0]
    assert isinstance(payload, CreateUserDTO)
    assert payload.age == 36
    assert payload.name == "Ada Lovelace"
    assert payload.email == "ada@example.com"


@pytest.mark.asyncio
async def test_action_strips_unknown_fields() -> None:
    process = Recorder(result={})

    await action(CreateUserDTO, process)({**VALID_INPUT, "is_admin": True})

    assert not hasattr(process.calls[0], "is_admin")


@pytest.mark.asyncio
async def test_action_validation_failure_lists_violated_fields() -> None:
    process = Recorder(result={})

    result = await action(CreateUserDTO, process)(
        {"name": "", "email": "not-an-email", "age": "13"}
    )

    assert isinstance(result, ValidationFailure)
    assert result.success is False
    assert list(result.error.field_errors) == ["name", "email", "age"]
    assert result.error.form_errors == []
    assert all(result.error.field_errors.values())
    assert process.calls == []


@pytest.mark.asyncio
async def test_action_only_reports_fields_that_failed() -> None:
    result = await action(CreateUserDTO, Recorder())({**VALID_INPUT, "age": 12})

    assert isinstance(result, ValidationFailure)
    assert set(result.error.field_errors) == {"age"}


@pytest.mark.asyncio
async def test_action_missing_fields_are_reported() -> None:
    result = await action(CreateUserDTO, Recorder())({})

    assert isinstance(result, ValidationFailure)
    assert set(result.error.field_errors) == {"name", "email", "age"}


@pytest.mark.asyncio
@pytest.mark.parametrize("raw_input", [None, "name=Ada", ["Ada"], 42])
async def test_action_does_not_raise_for_structurally_invalid_input(raw_input) -> None:
    process = Recorder()

    result = await action(CreateUserDTO, process)(raw_input)

    assert isinstance(result, ValidationFailure)
    assert result.error.form_errors
    assert result.error.field_errors == {}
    assert process.calls == []


@pytest.mark.asyncio
async def test_action_model_level_errors_are_form_errors() -> None:
    result = await action(Passwords, Recorder())({"password": "a", "confirm": "b"})

    assert isinstance(result, ValidationFailure)
    assert result.error.field_errors == {}
    assert result.error.form_errors == ["Value error, Passwords do not match"]


@pytest.mark.asyncio
async def test_action_masks_processing_errors(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="formaction.actions")
    process = Recorder(error=RuntimeError(SECRET))

    result = await action(CreateUserDTO, process)(VALID_INPUT)

    assert isinstance(result, InternalFailure)
    assert result.success is False
    assert result.error.form_errors == [INTERNAL_ERROR_MESSAGE]
    assert result.error.field_errors == {}
    assert SECRET not in str(dump_envelope(result))
    assert "RuntimeError" not in str(dump_envelope(result))

    records = [r for r in caplog.records if r.name == "formaction.actions"]
    assert len(records) == 1
    assert records[0].levelno == logging.ERROR
    assert records[0].exc_info is not None
    assert records[0].exc_info[1].args == (SECRET,)


@pytest.mark.asyncio
async def test_action_timeout_becomes_internal_failure(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="formaction.actions")

    async def slow(_: CreateUserDTO) -> dict:
        await asyncio.sleep(5)
        return {}

    result = await action(CreateUserDTO, slow, timeout=0.01)(VALID_INPUT)

    assert isinstance(result, InternalFailure)
    assert len([r for r in caplog.records if r.name == "formaction.actions"]) == 1


@pytest.mark.asyncio
async def test_action_invocations_are_independent() -> None:
    async def echo(payload: CreateUserDTO) -> str:
        await asyncio.sleep(0.01 if payload.name == "first" else 0)
        return payload.name

    create = action(CreateUserDTO, echo)
    first, second, invalid = await asyncio.gather(
        create({**VALID_INPUT, "name": "first"}),
        create({**VALID_INPUT, "name": "second"}),
        create({**VALID_INPUT, "name": ""}),
    )

    assert first.data == "first"
    assert second.data == "second"
    assert isinstance(invalid, ValidationFailure)


@pytest.mark.asyncio
async def test_server_action_raises_generic_error(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="formaction.actions")
    process = Recorder(error=RuntimeError(SECRET))

    with pytest.raises(InternalServerError) as exc:
        await server_action(CreateUserDTO, process)(VALID_INPUT)

    assert str(exc.value) == INTERNAL_ERROR_MESSAGE
    assert exc.value.code == "internal_error"
    assert exc.value.__suppress_context__ is True
    assert len([r for r in caplog.records if r.name == "formaction.actions"]) == 1


@pytest.mark.asyncio
async def test_server_action_raises_for_invalid_input() -> None:
    process = Recorder()

    with pytest.raises(ValidationError):
        await server_action(CreateUserDTO, process)({"name": ""})

    assert process.calls == []


@pytest.mark.asyncio
async def test_server_action_success() -> None:
    result = await server_action(CreateUserDTO, Recorder(result={"ok": True}))(VALID_INPUT)

    assert result.success is True
    assert result.data == {"ok": True}


@pytest.mark.asyncio
async def test_server_form_action_returns_validation_error() -> None:
    process = Recorder()

    response = await server_form_action(CreateUserDTO, process)({**VALID_INPUT, "age": 13})

    assert response.data is None
    assert response.validation_error is not None
    assert set(response.validation_error.field_errors) == {"age"}
    assert process.calls == []


@pytest.mark.asyncio
async def test_server_form_action_success_and_failure() -> None:
    ok = await server_form_action(CreateUserDTO, Recorder(result="done"))(VALID_INPUT)
    assert ok.validation_error is None
    assert ok.data == "done"

    with pytest.raises(InternalServerError):
        await server_form_action(CreateUserDTO, Recorder(error=KeyError("x")))(VALID_INPUT)
