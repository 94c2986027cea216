from fastapi import APIRouter, Request
from typing import Dict
from models import BatchProbeRequest, NetworkTypeOut, ProbeRequest, ProbeResultOut

import logging
logger = logging.getLogger("ReachProbe.ProbeRouter")

router = APIRouter(tags=["probe"])


@router.post("/probe", response_model=ProbeResultOut)
async def probe_host(req: ProbeRequest, request: Request):
    service = request.app.state.probe_service
    result = await service.probe_host(
        req.host, port=req.port, timeout_ms=req.timeout_ms,
        use_icmp=req.use_icmp, use_tcp=req.use_tcp,
    )
    return ProbeResultOut.from_result(result)


@router.post("/probe/batch", response_model=Dict[str, ProbeResultOut])
async def probe_hosts(req: BatchProbeRequest, request: Request):
    service = request.app.state.probe_service
    results = await service.probe_hosts(
        [(t.host, t.port) for t in req.targets], timeout_ms=req.timeout_ms,
        use_icmp=req.use_icmp, use_tcp=req.use_tcp,
    )
    return {key: ProbeResultOut.from_result(r) for key, r in results.items()}


@router.get("/network/type", response_model=NetworkTypeOut)
async def network_type(request: Request):
    service = request.app.state.probe_service
    return NetworkTypeOut(network_type=await service.get_network_type())
