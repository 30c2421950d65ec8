# acrolinx_bridge/services/check.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Set

from acrolinx_bridge.core import config
from acrolinx_bridge.core.errors import AcrolinxError, CheckCancelledError, PollTimeoutError
from acrolinx_bridge.models.report import CheckRange
from acrolinx_bridge.services.buffer import DocumentBuffer
from acrolinx_bridge.services.http import AcrolinxHttp
from acrolinx_bridge.services.poll import CheckJob, poll_until_ready
from acrolinx_bridge.services.render import Scorecard, render
from acrolinx_bridge.services.submit import content_format_for_mode, submit_check
from acrolinx_bridge.services.targets import CheckContext, Chooser, DefaultTarget, TargetResolver

log = logging.getLogger("acrolinx.check")


class AcrolinxSession:
    """
    State of the check workflow for one editor session.

    Holds the target cache and remembered targets, the scorecard shown
    for each document, in-flight checks and the last payloads seen from
    the server. Nothing here outlives the process.
    """

    def __init__(
        self,
        http: AcrolinxHttp,
        default_target: DefaultTarget = None,
        max_attempts: int = config.MAX_POLL_ATTEMPTS,
        poll_interval: float = config.POLL_INTERVAL,
        content_formats: Mapping[str, str] = config.CONTENT_FORMATS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.http = http
        self.max_attempts = max_attempts
        self.poll_interval = poll_interval
        self.content_formats = dict(content_formats)
        self.last_seen: Dict[str, Any] = {}
        self.targets = TargetResolver(http, default_target, on_payload=self._seen("capabilities"))
        self._sleep = sleep
        self._scorecards: Dict[str, Scorecard] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self._cancelled: Set[str] = set()

    def _seen(self, key: str):
        def record(payload):
            self.last_seen[key] = payload
        return record

    # --- scorecards ---

    def scorecard(self, doc_id: str) -> Optional[Scorecard]:
        return self._scorecards.get(doc_id)

    def close_scorecard(self, doc_id: str) -> bool:
        card = self._scorecards.pop(doc_id, None)
        if card is None:
            return False
        card.close()
        return True

    # --- checks ---

    async def check(
        self,
        doc_id: str,
        buffer: DocumentBuffer,
        check_range: Optional[CheckRange] = None,
        override_target: bool = False,
        chooser: Optional[Chooser] = None,
    ) -> Scorecard:
        """Run one check as a task of its own so that it can be cancelled."""
        if doc_id in self._tasks:
            raise RuntimeError(f"A check is already running for {doc_id}")
        task = asyncio.ensure_future(
            self._run_check(doc_id, buffer, check_range, override_target, chooser)
        )
        self._tasks[doc_id] = task
        try:
            return await task
        except asyncio.CancelledError:
            if doc_id in self._cancelled:
                raise CheckCancelledError(f"Check for {doc_id} was cancelled")
            raise
        finally:
            self._tasks.pop(doc_id, None)
            self._cancelled.discard(doc_id)

    def cancel(self, doc_id: str) -> bool:
        task = self._tasks.get(doc_id)
        if task is None or task.done():
            return False
        log.info("Cancelling check for %s", doc_id)
        self._cancelled.add(doc_id)
        return task.cancel()

    def running(self, doc_id: str) -> bool:
        return doc_id in self._tasks

    async def _run_check(
        self,
        doc_id: str,
        buffer: DocumentBuffer,
        check_range: Optional[CheckRange],
        override_target: bool,
        chooser: Optional[Chooser],
    ) -> Scorecard:
        context = CheckContext(document_identifier=buffer.reference, range=check_range)
        context.chosen_target = await self.targets.choose_target(
            context, override=override_target, chooser=chooser
        )
        content_format = content_format_for_mode(buffer.mode, self.content_formats)

        handle = await submit_check(
            self.http,
            buffer.text,
            context.chosen_target,
            content_format,
            check_range=check_range,
            reference=buffer.reference,
            on_payload=self._seen("check"),
        )
        job = CheckJob(
            result_url=handle.result_url,
            max_attempts=self.max_attempts,
            poll_interval_seconds=self.poll_interval,
            cancel_url=handle.cancel_url,
        )
        try:
            result = await poll_until_ready(self.http, job, on_payload=self._seen("result"), sleep=self._sleep)
        except (PollTimeoutError, asyncio.CancelledError):
            await self._cancel_remote(job)
            raise

        self.close_scorecard(doc_id)
        card = render(buffer, result, target_id=context.chosen_target.id)
        self._scorecards[doc_id] = card
        log.info("Check for %s done: score=%d issues=%d", doc_id, card.score, len(card.annotations))
        return card

    async def _cancel_remote(self, job: CheckJob):
        if not job.cancel_url:
            return
        try:
            resp = await self.http.delete(job.cancel_url)
        except AcrolinxError as e:
            log.warning("Could not cancel Acrolinx check %s: %s", job.cancel_url, e)
            return
        if resp.status_code >= 300:
            log.warning("Cancelling %s answered HTTP %d", job.cancel_url, resp.status_code)
