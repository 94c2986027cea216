import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

from validation import validate_host, validate_port


class ProbeMethod(str, Enum):
    ICMP = "icmp"
    TCP = "tcp"
    SYSTEM = "system"
    NETWORK_CHECK = "network_check"
    EXCEPTION = "exception"
    NO_METHODS = "no_methods"
    CONTINUOUS = "continuous"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of one reachability question, from a single strategy or the aggregate"""
    success: bool
    latency_ms: int
    method: ProbeMethod
    error: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        if self.success and (self.latency_ms < 0 or self.error is not None):
            raise ValueError("successful result needs latency >= 0 and no error")
        if not self.success and self.latency_ms != -1:
            raise ValueError("failed result must carry latency -1")

    @classmethod
    def ok(cls, method: ProbeMethod, latency_ms: int) -> "ProbeResult":
        return cls(success=True, latency_ms=int(latency_ms), method=method)

    @classmethod
    def failed(cls, method: ProbeMethod, error: Optional[str] = None) -> "ProbeResult":
        return cls(success=False, latency_ms=-1, method=method, error=error)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "latency": self.latency_ms,
            "method": self.method.value,
            "error": self.error,
            "timestamp": int(self.timestamp * 1000),
        }


@dataclass(frozen=True)
class HostTarget:
    host: str
    port: int = 80
    timeout_ms: int = 5000
    use_icmp: bool = True
    use_tcp: bool = True

    @property
    def key(self) -> str:
        return f"{self.host}:{self.port}"


# Pydantic Models (API)
class ProbeResultOut(BaseModel):
    success: bool
    latency: int
    method: str
    error: Optional[str] = None
    timestamp: int

    @classmethod
    def from_result(cls, result: ProbeResult) -> "ProbeResultOut":
        return cls(**result.to_dict())


class TargetBase(BaseModel):
    host: str
    port: int = 80

    @field_validator('host')
    @classmethod
    def check_host(cls, v: str) -> str:
        v = v.strip()
        if not validate_host(v):
            raise ValueError('Invalid host: must be an IP address or hostname')
        return v

    @field_validator('port')
    @classmethod
    def check_port(cls, v: int) -> int:
        if not validate_port(v):
            raise ValueError('Port must be between 1 and 65535')
        return v


class ProbeRequest(TargetBase):
    timeout_ms: Optional[int] = Field(default=None, gt=0)
    use_icmp: bool = True
    use_tcp: bool = True


class BatchProbeRequest(BaseModel):
    targets: List[TargetBase]
    timeout_ms: Optional[int] = Field(default=None, gt=0)
    use_icmp: bool = True
    use_tcp: bool = True


class MonitorRequest(TargetBase):
    interval_ms: Optional[int] = Field(default=None, ge=0)


class MonitorOut(BaseModel):
    id: str
    host: str
    port: int
    interval_ms: int
    state: str


class NetworkTypeOut(BaseModel):
    network_type: str
