from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from acrolinx_bridge.core import config
from acrolinx_bridge.core.errors import ParseError, SubmissionError, TransportError
from acrolinx_bridge.models.report import CheckRange, Target
from acrolinx_bridge.services.decode import decode_response
from acrolinx_bridge.services.http import AcrolinxHttp

log = logging.getLogger("acrolinx.submit")


@dataclass
class CheckHandle:
    result_url: str
    cancel_url: Optional[str] = None


def content_format_for_mode(mode: Optional[str], formats: Mapping[str, str] = config.CONTENT_FORMATS) -> str:
    return formats.get(mode or "", config.AUTO_FORMAT)


def encode_content(text: Union[str, bytes]) -> str:
    raw = text.encode("utf-8") if isinstance(text, str) else text
    return base64.b64encode(raw).decode("ascii")


def build_check_request(
    text: Union[str, bytes],
    target: Target,
    content_format: str,
    check_range: Optional[CheckRange] = None,
    reference: str = "",
) -> Dict[str, Any]:
    check_options: Dict[str, Any] = {
        "guidanceProfileId": target.id,
        "contentFormat": content_format or config.AUTO_FORMAT,
        "checkType": config.CHECK_TYPE,
    }
    if check_range is not None:
        # host positions are 1-based, the server counts from 0
        check_options["partialCheckRanges"] = [
            {"begin": check_range.begin - 1, "end": check_range.end - 1}
        ]
    return {
        "content": encode_content(text),
        "contentEncoding": config.CONTENT_ENCODING,
        "checkOptions": check_options,
        "document": {"reference": reference},
    }


async def submit_check(
    http: AcrolinxHttp,
    text: Union[str, bytes],
    target: Target,
    content_format: str,
    check_range: Optional[CheckRange] = None,
    reference: str = "",
    on_payload=None,
) -> CheckHandle:
    body = build_check_request(text, target, content_format, check_range, reference)
    resp = await http.post(http.api_url(config.CHECKS_PATH), body)
    try:
        payload = decode_response(resp)
    except (TransportError, ParseError) as e:
        raise SubmissionError(f"Check submission failed: {e}") from e
    if on_payload:
        on_payload(payload)

    links = payload.get("links") or {}
    result_url = links.get("result")
    if not result_url:
        raise SubmissionError("Check response carries no result link")
    log.info("Submitted check target=%s format=%s ref=%s", target.id, content_format, reference)
    return CheckHandle(result_url=result_url, cancel_url=links.get("cancel"))
