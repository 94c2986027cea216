import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from probe_service import ProbeService
from result_feed import MonitorFeed
from routers import config, monitors, probe
from settings import load_settings

settings = load_settings()

# Setup Logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("ReachProbe")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("ReachProbe Backend Starting...")
    if not hasattr(app.state, "probe_service"):
        app.state.probe_service = ProbeService(settings)
    if not hasattr(app.state, "monitor_feed"):
        app.state.monitor_feed = MonitorFeed()

    yield

    # Shutdown
    logger.info("ReachProbe Backend Stopping...")
    await app.state.probe_service.shutdown()


app = FastAPI(title="ReachProbe API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], # In production, set to specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include Routers
app.include_router(probe.router)
app.include_router(monitors.router)
app.include_router(config.router)


@app.get("/")
def read_root():
    return {"status": "online", "service": "ReachProbe"}


@app.get("/status")
async def get_status():
    service = app.state.probe_service
    return {
        "network_type": await service.get_network_type(),
        "monitors": [h.to_dict() for h in service.monitor.list_monitors()],
    }
