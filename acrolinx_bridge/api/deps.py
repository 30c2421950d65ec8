from fastapi import HTTPException, Request
from acrolinx_bridge.core.errors import (
    AcrolinxError, ConfigurationError, ParseError, PollTimeoutError,
    SelectionError, SubmissionError, TransportError,
)
from acrolinx_bridge.models.report import EntryView, ScorecardView
from acrolinx_bridge.services.check import AcrolinxSession
from acrolinx_bridge.services.render import Annotation, Scorecard
from acrolinx_bridge.utils.storage import BufferStore


def get_session(request: Request) -> AcrolinxSession:
    return request.app.state.session


def get_buffers(request: Request) -> BufferStore:
    return request.app.state.buffers


def get_scorecard(session: AcrolinxSession, doc_id: str) -> Scorecard:
    card = session.scorecard(doc_id)
    if card is None:
        raise HTTPException(status_code=404, detail="No scorecard for document")
    return card


def get_entry(card: Scorecard, n: int) -> Annotation:
    try:
        return card.entry(n)
    except IndexError:
        raise HTTPException(status_code=404, detail="Scorecard entry not found")


def http_error(e: AcrolinxError) -> HTTPException:
    if isinstance(e, SelectionError):
        targets = [t.model_dump(by_alias=True) for t in e.targets]
        return HTTPException(status_code=409, detail={"message": str(e), "targets": targets})
    if isinstance(e, PollTimeoutError):
        return HTTPException(status_code=504, detail=str(e))
    if isinstance(e, ConfigurationError):
        return HTTPException(status_code=500, detail=str(e))
    if isinstance(e, (TransportError, ParseError, SubmissionError)):
        return HTTPException(status_code=502, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


def entry_view(a: Annotation) -> EntryView:
    live = a.marker is not None and not a.marker.released
    return EntryView(
        index=a.index,
        name=a.name,
        header=a.header,
        label=a.label,
        source_begin=a.source_begin,
        source_end=a.source_end,
        start=a.marker.start if live else None,
        end=a.marker.end if live else None,
        suggestions=a.suggestions,
        guidance=a.guidance if a.expanded else None,
        expanded=a.expanded,
        face=a.marker.face if live else None,
    )


def scorecard_view(doc_id: str, card: Scorecard) -> ScorecardView:
    return ScorecardView(
        doc_id=doc_id,
        target=card.target_id,
        score=card.score,
        goals=[g.display_name or g.id for g in card.goals],
        entries=[entry_view(a) for a in card.annotations],
        text=card.render_text(),
    )
