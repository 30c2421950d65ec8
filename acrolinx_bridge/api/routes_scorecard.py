from fastapi import APIRouter, Depends, HTTPException
from acrolinx_bridge.api.deps import (
    entry_view, get_buffers, get_entry, get_scorecard, get_session, scorecard_view,
)
from acrolinx_bridge.services.check import AcrolinxSession
from acrolinx_bridge.utils.storage import BufferStore

router = APIRouter(tags=["scorecard"])

@router.get("/scorecard/{doc_id}")
def show(doc_id: str, session: AcrolinxSession = Depends(get_session)):
    return scorecard_view(doc_id, get_scorecard(session, doc_id)).model_dump()

@router.post("/scorecard/{doc_id}/entries/{n}/jump")
def jump(doc_id: str, n: int,
         session: AcrolinxSession = Depends(get_session),
         buffers: BufferStore = Depends(get_buffers)):
    entry = get_entry(get_scorecard(session, doc_id), n)
    try:
        point = entry.jump(buffers.get(doc_id))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"point": point, "start": entry.marker.start, "end": entry.marker.end}

@router.post("/scorecard/{doc_id}/entries/{n}/suggestions/{k}")
def apply_suggestion(doc_id: str, n: int, k: int,
                     session: AcrolinxSession = Depends(get_session),
                     buffers: BufferStore = Depends(get_buffers)):
    entry = get_entry(get_scorecard(session, doc_id), n)
    try:
        text = entry.apply_suggestion(buffers.get(doc_id), k)
    except IndexError:
        raise HTTPException(status_code=404, detail="Suggestion not found")
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"doc_id": doc_id, "text": text, "entry": entry_view(entry).model_dump()}

@router.post("/scorecard/{doc_id}/entries/{n}/guidance")
def toggle_guidance(doc_id: str, n: int, session: AcrolinxSession = Depends(get_session)):
    entry = get_entry(get_scorecard(session, doc_id), n)
    entry.toggle_guidance()
    return entry_view(entry).model_dump()

@router.delete("/scorecard/{doc_id}")
def close(doc_id: str, session: AcrolinxSession = Depends(get_session)):
    if not session.close_scorecard(doc_id):
        raise HTTPException(status_code=404, detail="No scorecard for document")
    return {"doc_id": doc_id, "closed": True}
