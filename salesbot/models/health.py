from pydantic import BaseModel, ConfigDict, Field


class HealthStatus(BaseModel):
    """Backend health as reported by the sales backend."""

    model_config = ConfigDict(extra="ignore")

    status: str = Field("unknown", description="Backend reachability (online/offline)")
    sql: str = Field("unknown", description="Data store connectivity")
    ai: str = Field("unknown", description="Model credential presence")

    @classmethod
    def offline(cls) -> "HealthStatus":
        return cls(status="offline", sql="disconnected", ai="unknown")

    @property
    def label(self) -> str:
        if self.status == "offline":
            return "Backend Offline"
        if self.sql == "error":
            return "SQL Error (Check Pass)"
        if self.ai == "missing":
            return "API Key Missing"
        if self.sql == "connected":
            return "SQL Connected"
        return "Checking..."

    @property
    def ready(self) -> bool:
        return self.status == "online" and self.sql == "connected" and self.ai != "missing"


class HealthReport(BaseModel):
    status: str
    sql: str
    ai: str
    label: str
    ready: bool

    @classmethod
    def from_status(cls, health: HealthStatus) -> "HealthReport":
        return cls(**health.model_dump(), label=health.label, ready=health.ready)
