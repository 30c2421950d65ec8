from fastapi import FastAPI
from acrolinx_bridge.api.routes_upload import router as upload_router
from acrolinx_bridge.api.routes_download import router as download_router
from acrolinx_bridge.api.routes_targets import router as targets_router
from acrolinx_bridge.api.routes_check import router as check_router
from acrolinx_bridge.api.routes_scorecard import router as scorecard_router
from acrolinx_bridge.middleware.limits import BodySizeLimitMiddleware
from acrolinx_bridge.core import config
from acrolinx_bridge.services.check import AcrolinxSession
from acrolinx_bridge.services.http import AcrolinxHttp
from acrolinx_bridge.utils.storage import BufferStore


def build_session() -> AcrolinxSession:
    http = AcrolinxHttp(config.SERVER_URL, config.CLIENT_SIGNATURE, config.API_TOKEN)
    return AcrolinxSession(http, default_target=config.DEFAULT_TARGET)


app = FastAPI(title="AcrolinxBridge")

app.add_middleware(BodySizeLimitMiddleware)
app.state.session = build_session()
app.state.buffers = BufferStore()

@app.get("/health")
def health():
    return {"status": "ok"}

app.include_router(upload_router)
app.include_router(download_router)
app.include_router(targets_router)
app.include_router(check_router)
app.include_router(scorecard_router)
