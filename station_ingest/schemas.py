from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class ReportAccepted(BaseModel):
    status: str = "accepted"
    num_values: int


class ReadyStatus(BaseModel):
    status: str


class MQTTHealth(BaseModel):
    status: str
    broker: str
    connected: bool
    discovery: bool
    stats: dict
    client_id: Optional[str] = None
