"""Simple form client for manual testing."""

from __future__ import annotations

import argparse
import asyncio
import logging
import time

import httpx

from formaction.client import FormClient
from formaction.exceptions import ActionClientError
from formaction.forms import FormState

DEFAULT_URL = "http://127.0.0.1:8000"
DEFAULT_PATH = "/actions/create-user"


async def run_client(
    url: str,
    values: dict[str, str],
    timeout: float,
    path: str = DEFAULT_PATH,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FormState:
    """Submit the form once and log the outcome."""

    logger = logging.getLogger("submit_form")
    start = time.perf_counter()
    form = FormState(values)

    async with httpx.AsyncClient(transport=transport) as http_client:
        forms = FormClient(http_client, base_url=url, timeout=timeout)
        envelope = await forms.submit(path, form)

    elapsed = time.perf_counter() - start
    if envelope.success:
        logger.info("Form accepted in %.2fs: %s", elapsed, envelope.data)
        return form

    for name, error in form.errors.items():
        logger.error("%s: %s", name, error.message)
    if form.focused_field:
        logger.info("Focus moves to %s", form.focused_field)
    return form


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Test client for the form action service.")
    parser.add_argument("--url", default=DEFAULT_URL, help="Service URL (default: %(default)s)")
    parser.add_argument("--name", default="Herman Miller", help="Name field.")
    parser.add_argument("--email", default="herman@miller.com", help="Email field.")
    parser.add_argument("--age", default="13", help="Age field, sent as entered.")
    parser.add_argument(
        "--timeout", type=float, default=30.0, help="Seconds to wait for the action to finish."
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    values = {"name": args.name, "email": args.email, "age": args.age}
    try:
        form = asyncio.run(run_client(args.url, values, args.timeout))
    except ActionClientError as exc:
        logging.getLogger("submit_form").error("Submission failed: %s", exc)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:  # pragma: no cover - manual usage only
        return
    if form.has_errors:
        raise SystemExit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
