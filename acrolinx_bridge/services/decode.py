import json
import logging
from typing import Any, Dict

import httpx

from acrolinx_bridge.core.errors import ParseError, TransportError

log = logging.getLogger("acrolinx.decode")


def decode_response(resp: httpx.Response) -> Dict[str, Any]:
    """Check the status range and parse the body as UTF-8 JSON."""
    body = resp.content.decode("utf-8", errors="replace")
    if not 200 <= resp.status_code < 300:
        raise TransportError(
            f"Acrolinx answered HTTP {resp.status_code}",
            status=resp.status_code,
            body=body,
        )
    try:
        data = json.loads(body)
    except ValueError as e:
        log.warning("Unparsable Acrolinx response: %r", body)
        raise ParseError(f"Response is not valid JSON: {e}", body=body) from e
    if not isinstance(data, dict):
        log.warning("Unexpected Acrolinx response shape: %r", body)
        raise ParseError("Response is not a JSON object", body=body)
    return data
