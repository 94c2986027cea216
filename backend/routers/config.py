from fastapi import APIRouter, HTTPException, Request
from settings import ProbeSettings, save_settings

import logging
logger = logging.getLogger("ReachProbe.Config")

router = APIRouter(prefix="/config", tags=["configuration"])


@router.get("/probe", response_model=ProbeSettings)
def get_probe_config(request: Request):
    """Get the effective probe configuration"""
    return request.app.state.probe_service.settings


@router.put("/probe", response_model=ProbeSettings)
def update_probe_config(settings: ProbeSettings, request: Request):
    """Persist probe configuration to config.json and apply it"""
    try:
        save_settings(settings)
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"Could not save configuration: {e}")

    request.app.state.probe_service.reload_settings(settings)
    return settings
