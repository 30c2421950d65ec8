from fastapi import APIRouter, Depends, Query
from acrolinx_bridge.api.deps import get_session, http_error
from acrolinx_bridge.core.errors import AcrolinxError
from acrolinx_bridge.services.check import AcrolinxSession

router = APIRouter(tags=["targets"])

@router.get("/targets")
async def targets(
    refresh: bool = Query(False, description="Ignore the cached list and ask the server again"),
    session: AcrolinxSession = Depends(get_session),
):
    try:
        found = await session.targets.list_targets(force_refresh=refresh)
    except AcrolinxError as e:
        raise http_error(e)
    return [t.model_dump(by_alias=True) for t in found]
