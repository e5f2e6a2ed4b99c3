from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class DemoSpan(str, Enum):
    API_CALL = "api_call"
    CONNECT_DB = "connect_db"
    CACHE_LOOKUP = "cache_lookup"


class DemoAttribute(str, Enum):
    USER_ID = "user_id"
    CACHE_HIT = "cache_hit"


class DemoStep(BaseModel):
    step: str
    stack: list[str]


class DemoTraceResponse(BaseModel):
    user_id: str
    display_name: str
    trace_id: str
    steps: list[DemoStep]
