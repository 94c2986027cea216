"""
Monitor Router - Start, cancel and stream continuous probes
"""
import asyncio
import json
import logging
import uuid
from typing import List
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import StreamingResponse
from models import MonitorOut, MonitorRequest

logger = logging.getLogger("ReachProbe.MonitorRouter")

router = APIRouter(prefix="/monitors", tags=["monitors"])


def _get_handle(request: Request, monitor_id: str):
    handle = request.app.state.probe_service.monitor.get(monitor_id)
    if handle is None:
        raise HTTPException(status_code=404, detail="Monitor not found")
    return handle


@router.post("", response_model=MonitorOut)
async def start_monitor(req: MonitorRequest, request: Request):
    service = request.app.state.probe_service
    feed = request.app.state.monitor_feed

    monitor_id = str(uuid.uuid4())
    handle = service.start_monitor(
        req.host, port=req.port, interval_ms=req.interval_ms,
        on_result=feed.sink(monitor_id), monitor_id=monitor_id,
    )
    return MonitorOut(**handle.to_dict())


@router.get("", response_model=List[MonitorOut])
async def list_monitors(request: Request):
    service = request.app.state.probe_service
    return [MonitorOut(**h.to_dict()) for h in service.monitor.list_monitors()]


@router.delete("/{monitor_id}", response_model=MonitorOut)
async def cancel_monitor(monitor_id: str, request: Request):
    handle = _get_handle(request, monitor_id)
    request.app.state.probe_service.cancel_monitor(handle)
    if handle.task is not None:
        # Buffered results go once the loop has exited
        feed = request.app.state.monitor_feed
        handle.task.add_done_callback(lambda _: feed.drop(monitor_id))
    return MonitorOut(**handle.to_dict())


@router.get("/{monitor_id}/events")
async def get_recent_results(monitor_id: str, request: Request, limit: int = 100):
    """Get recent results of one monitor"""
    _get_handle(request, monitor_id)
    return {"results": request.app.state.monitor_feed.get_recent(monitor_id, limit)}


@router.get("/{monitor_id}/stream")
async def stream_results(monitor_id: str, request: Request):
    """SSE endpoint for real-time monitor results"""
    _get_handle(request, monitor_id)
    feed = request.app.state.monitor_feed

    async def event_generator():
        queue = await feed.subscribe(monitor_id)
        try:
            while True:
                if await request.is_disconnected():
                    break

                try:
                    # Wait with timeout to check connection periodically
                    result = await asyncio.wait_for(queue.get(), timeout=30.0)
                    yield f"data: {json.dumps(result.to_dict())}\n\n"
                except asyncio.TimeoutError:
                    yield ": keepalive\n\n"
        finally:
            await feed.unsubscribe(monitor_id, queue)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no"  # Disable nginx buffering
        }
    )
