from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from acrolinx_bridge.api.deps import get_buffers
from acrolinx_bridge.utils.storage import BufferStore

router = APIRouter(tags=["buffers"])


class BufferIn(BaseModel):
    text: str
    identifier: Optional[str] = None
    path: Optional[str] = None
    mode: str = "text-mode"


class EditIn(BaseModel):
    begin: int
    end: int
    text: str = ""


@router.post("/buffers")
def register_buffer(body: BufferIn, buffers: BufferStore = Depends(get_buffers)):
    doc_id, buf = buffers.register(body.text, body.identifier, body.path, body.mode)
    return {"doc_id": doc_id, "reference": buf.reference}


@router.post("/buffers/{doc_id}/edits")
def edit_buffer(doc_id: str, edit: EditIn, buffers: BufferStore = Depends(get_buffers)):
    buf = buffers.get(doc_id)
    try:
        buf.replace(edit.begin, edit.end, edit.text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"doc_id": doc_id, "text": buf.text}
