from fastapi import APIRouter, Depends
from acrolinx_bridge.api.deps import get_buffers
from acrolinx_bridge.utils.storage import BufferStore

router = APIRouter(tags=["buffers"])

@router.get("/buffers/{doc_id}")
def read_buffer(doc_id: str, buffers: BufferStore = Depends(get_buffers)):
    buf = buffers.get(doc_id)
    return {"doc_id": doc_id, "text": buf.text, "point": buf.point, "mode": buf.mode}
