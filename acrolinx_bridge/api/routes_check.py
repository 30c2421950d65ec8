from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from acrolinx_bridge.api.deps import get_buffers, get_session, http_error, scorecard_view
from acrolinx_bridge.core.errors import AcrolinxError, CheckCancelledError
from acrolinx_bridge.models.report import CheckRange
from acrolinx_bridge.services.check import AcrolinxSession
from acrolinx_bridge.utils.storage import BufferStore

router = APIRouter(tags=["check"])

@router.post("/check")
async def check(
    doc_id: str = Query(..., description="Document ID returned by /buffers"),
    target: Optional[str] = Query(None, description="Target id or name picked by the user"),
    override: bool = Query(False, description="Ask for a target even if one is remembered"),
    begin: Optional[int] = Query(None, description="Selection start (1-based)"),
    end: Optional[int] = Query(None, description="Selection end (1-based, exclusive)"),
    session: AcrolinxSession = Depends(get_session),
    buffers: BufferStore = Depends(get_buffers),
):
    buf = buffers.get(doc_id)
    if session.running(doc_id):
        raise HTTPException(status_code=409, detail="A check is already running for this document")

    check_range = None
    if begin is not None or end is not None:
        if begin is None or end is None or not (buf.point_min <= begin <= end <= buf.point_max):
            raise HTTPException(status_code=400, detail="Invalid selection")
        check_range = CheckRange(begin=begin, end=end)

    chooser = (lambda targets, suggested: target) if target else None
    try:
        card = await session.check(
            doc_id, buf, check_range=check_range,
            override_target=override or bool(target), chooser=chooser,
        )
    except CheckCancelledError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except AcrolinxError as e:
        raise http_error(e)
    return scorecard_view(doc_id, card).model_dump()

@router.delete("/check")
def cancel_check(
    doc_id: str = Query(...),
    session: AcrolinxSession = Depends(get_session),
):
    return {"doc_id": doc_id, "cancelled": session.cancel(doc_id)}
