from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Union

from acrolinx_bridge.core import config
from acrolinx_bridge.core.errors import ConfigurationError, SelectionError
from acrolinx_bridge.models.report import CheckRange, Target
from acrolinx_bridge.services.decode import decode_response
from acrolinx_bridge.services.http import AcrolinxHttp

log = logging.getLogger("acrolinx.targets")


@dataclass
class CheckContext:
    document_identifier: str
    chosen_target: Optional[Target] = None
    range: Optional[CheckRange] = None


# chooser(targets, suggested) -> id or display name picked by the user, None if cancelled
Chooser = Callable[[List[Target], Target], Optional[str]]
DefaultTarget = Union[str, Callable[[CheckContext], Optional[str]], None]


class TargetResolver:
    def __init__(self, http: AcrolinxHttp, default_target: DefaultTarget = None, on_payload=None):
        self.http = http
        self.default_target = default_target
        self._cache: Optional[List[Target]] = None
        self._remembered: Dict[str, Target] = {}
        self._on_payload = on_payload

    async def list_targets(self, force_refresh: bool = False) -> List[Target]:
        if self._cache is not None and not force_refresh:
            return self._cache
        resp = await self.http.get(self.http.api_url(config.CAPABILITIES_PATH))
        payload = decode_response(resp)
        if self._on_payload:
            self._on_payload(payload)
        profiles = (payload.get("data") or {}).get("guidanceProfiles") or []
        if not profiles:
            raise ConfigurationError("Acrolinx server offers no guidance profiles")
        self._cache = [Target.model_validate(p) for p in profiles]
        log.info("Fetched %d Acrolinx targets", len(self._cache))
        return self._cache

    def remembered(self, document_identifier: str) -> Optional[Target]:
        return self._remembered.get(document_identifier)

    def remember(self, document_identifier: str, target: Target):
        self._remembered[document_identifier] = target

    def _configured_default(self, context: CheckContext) -> Optional[str]:
        if callable(self.default_target):
            return self.default_target(context)
        return self.default_target

    async def choose_target(
        self,
        context: CheckContext,
        override: bool = False,
        chooser: Optional[Chooser] = None,
    ) -> Target:
        doc = context.document_identifier
        if not override:
            known = self._remembered.get(doc)
            if known is not None:
                return known
            default_id = self._configured_default(context)
            if default_id:
                target = self._find_cached(default_id) or Target(id=default_id, display_name=default_id)
                self.remember(doc, target)
                return target

        targets = await self.list_targets()
        answer = chooser(targets, targets[0]) if chooser else None
        target = _match(targets, answer)
        if target is None:
            raise SelectionError(
                f"No valid Acrolinx target chosen for {doc}" + (f" (got {answer!r})" if answer else ""),
                targets=targets,
            )
        self.remember(doc, target)
        return target

    def _find_cached(self, wanted: str) -> Optional[Target]:
        return _match(self._cache or [], wanted)


def _match(targets: List[Target], answer: Optional[str]) -> Optional[Target]:
    if not answer:
        return None
    for t in targets:
        if answer in (t.id, t.display_name):
            return t
    return None
