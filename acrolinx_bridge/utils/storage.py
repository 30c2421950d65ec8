import uuid
from typing import Dict, Optional
from fastapi import HTTPException
from acrolinx_bridge.services.buffer import DocumentBuffer


class BufferStore:
    """Editor buffers pushed to the bridge, kept in memory for the session only."""

    def __init__(self):
        self._buffers: Dict[str, DocumentBuffer] = {}

    def register(self, text: str, identifier: Optional[str] = None,
                 path: Optional[str] = None, mode: str = "text-mode") -> tuple[str, DocumentBuffer]:
        doc_id = uuid.uuid4().hex[:12]
        buf = DocumentBuffer(text, identifier or path or doc_id, path=path, mode=mode)
        self._buffers[doc_id] = buf
        return doc_id, buf

    def get(self, doc_id: str) -> DocumentBuffer:
        buf = self._buffers.get(doc_id)
        if buf is None:
            raise HTTPException(status_code=404, detail="Document not found")
        return buf

    def __contains__(self, doc_id: str) -> bool:
        return doc_id in self._buffers
