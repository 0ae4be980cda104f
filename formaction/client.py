"""Client for submitting forms to action endpoints."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from formaction.exceptions import ActionClientError
from formaction.forms import FormState, apply_server_errors
from formaction.models import ErrorEnvelope, Success, parse_envelope

logger = logging.getLogger(__name__)


class FormClient:
    """Submits form values and applies returned errors to the form.

    Create one per session around a scoped ``httpx.AsyncClient`` and pass it
    to whatever submits forms::

        async with httpx.AsyncClient() as http_client:
            forms = FormClient(http_client, base_url="http://127.0.0.1:8000")
            envelope = await forms.submit("/actions/create-user", form)
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = "",
        timeout: float | None = 30.0,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def submit(self, path: str, form: FormState) -> Success | ErrorEnvelope:
        """Post the form values and return the parsed envelope.

        Only envelope endpoints (``/actions/*``) are supported; the
        ``/forms/*`` variant answers with a different shape and is rejected
        as an invalid payload. Errors from the previous submission are
        cleared first, and error envelopes are applied to ``form`` before
        returning.
        """

        form.clear_errors()
        try:
            response = await self._client.post(
                f"{self._base_url}{path}",
                json=form.values,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            logger.warning("Form submission timed out", exc_info=exc)
            raise ActionClientError("Form submission timed out") from exc
        except httpx.HTTPError as exc:
            logger.exception("Unexpected form submission HTTP error")
            raise ActionClientError("Form submission failed") from exc

        try:
            envelope = parse_envelope(response.json())
        except (ValueError, ValidationError, AttributeError) as exc:
            logger.error(
                "Malformed action response",
                extra={"status_code": response.status_code},
            )
            raise ActionClientError(
                "Invalid action response payload", status_code=response.status_code
            ) from exc

        if isinstance(envelope, ErrorEnvelope):
            apply_server_errors(form, envelope.error)

        return envelope
