from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from opentelemetry.trace import StatusCode, format_trace_id

from tracestack.core.config import get_settings
from tracestack.schemas.demo import DemoAttribute, DemoSpan, DemoStep, DemoTraceResponse
from tracestack.telemetry.spans import span
from tracestack.telemetry.trace import Trace

router = APIRouter()

USERS_ROUTE = "/api/v1/demo/users/{user_id}"

# Stand-in for a user table; the route only exists to show span nesting.
_USERS: dict[str, str] = {
    "42": "Ada Lovelace",
    "7": "Grace Hopper",
}
_CACHE: dict[str, str] = {}


def _step(step: str, trace: Trace) -> DemoStep:
    return DemoStep(step=step, stack=[getattr(s, "name", "") for s in trace.get_span_stack()])


@router.get("/users/{user_id}", response_model=DemoTraceResponse)
def lookup_user(user_id: str, request: Request) -> DemoTraceResponse:
    trace: Trace[DemoSpan, DemoAttribute] = Trace(
        request.app.state.tracer,
        span_names=DemoSpan,
        attribute_keys=DemoAttribute,
        strict=get_settings().strict_names,
    )
    steps: list[DemoStep] = []

    api_call = trace.start_span(DemoSpan.API_CALL, attributes={"http.route": USERS_ROUTE})
    try:
        with span(trace, DemoSpan.CONNECT_DB, **{"db.system": "memory"}):
            # The user id is only known here, after api_call is already open.
            trace.add_common_attribute(DemoAttribute.USER_ID, user_id)
            steps.append(_step("connect_db", trace))
            display_name = _USERS.get(user_id)
        steps.append(_step("connect_db_ended", trace))

        with span(trace, DemoSpan.CACHE_LOOKUP) as cache_lookup:
            cache_hit = user_id in _CACHE
            cache_lookup.set_attribute(DemoAttribute.CACHE_HIT, str(cache_hit).lower())
            if display_name is not None:
                _CACHE[user_id] = display_name
            steps.append(_step("cache_lookup", trace))

        if display_name is None:
            api_call.set_status(StatusCode.ERROR, "user not found")
            raise HTTPException(status_code=404, detail=f"User {user_id} not found")

        api_call.add_event("user.resolved", {"user.display_name": display_name})
        return DemoTraceResponse(
            user_id=user_id,
            display_name=display_name,
            trace_id=format_trace_id(api_call.get_span_context().trace_id),
            steps=steps,
        )
    finally:
        api_call.end()
