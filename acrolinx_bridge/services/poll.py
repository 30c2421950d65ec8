from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import ValidationError

from acrolinx_bridge.core import config
from acrolinx_bridge.core.errors import ParseError, PollTimeoutError
from acrolinx_bridge.models.report import ResultPayload
from acrolinx_bridge.services.decode import decode_response
from acrolinx_bridge.services.http import AcrolinxHttp

log = logging.getLogger("acrolinx.poll")


@dataclass
class CheckJob:
    result_url: str
    max_attempts: int = config.MAX_POLL_ATTEMPTS
    poll_interval_seconds: float = config.POLL_INTERVAL
    cancel_url: Optional[str] = None
    attempts_made: int = 0


async def poll_until_ready(
    http: AcrolinxHttp,
    job: CheckJob,
    on_payload: Optional[Callable[[Dict[str, Any]], None]] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> ResultPayload:
    """
    Wait, GET the result URL, repeat until the payload has ``data``.

    Raises PollTimeoutError once ``job.max_attempts`` requests came back
    without data. Transport errors end the loop immediately.
    """
    while job.attempts_made < job.max_attempts:
        await sleep(job.poll_interval_seconds)
        job.attempts_made += 1
        resp = await http.get(job.result_url)
        try:
            payload = decode_response(resp)
        except ParseError:
            payload = {}
        if on_payload:
            on_payload(payload)

        data = payload.get("data")
        if data is not None:
            log.info("Check result ready after %d attempt(s)", job.attempts_made)
            try:
                return ResultPayload.from_data(data)
            except (ValidationError, ValueError, TypeError, AttributeError) as e:
                log.warning("Malformed Acrolinx result: %r", data)
                raise ParseError(f"Result payload is malformed: {e}", body=json.dumps(data)) from e
        log.debug("Check not ready (attempt %d/%d)", job.attempts_made, job.max_attempts)

    raise PollTimeoutError(
        f"Acrolinx check did not complete after {job.attempts_made} attempts; run the check again",
        attempts=job.attempts_made,
    )
