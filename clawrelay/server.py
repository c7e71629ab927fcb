"""FastAPI host surface for the relay and the rate monitor."""

from __future__ import annotations

import logging
from dataclasses import asdict
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse, PlainTextResponse

from clawrelay.errors import RelayError
from clawrelay.state import RuntimeDeps
from clawrelay.handlers import (
    status_for_error,
    parse_rate_record,
    parse_relay_body,
    build_error_payload,
    relay_error_payload,
)
from clawrelay.relay.report import build_report
from clawrelay.runtime.logging import configure_logging
from clawrelay.handlers.errors import STATUS_BAD_REQUEST
from clawrelay.runtime.dependencies import build_runtime_deps

logger = logging.getLogger(__name__)

ERROR_KIND_INVALID_REQUEST = "invalid_request"


def _deps(request: Request) -> RuntimeDeps:
    runtime_deps = getattr(request.app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def create_app(runtime_deps: RuntimeDeps | None = None) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        app.state.runtime_deps = build_runtime_deps() if runtime_deps is None else runtime_deps
        logger.info("runtime: ready")
        yield

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/diagnostics")
    async def diagnostics(request: Request) -> dict:
        deps = _deps(request)
        report = await deps.router.diagnostics()
        return {"relay": asdict(report), "recent_errors": deps.recent_errors.entries()}

    @app.get("/rates")
    async def rates(request: Request) -> dict:
        deps = _deps(request)
        return {
            "snapshot": asdict(deps.rate_monitor.snapshot()),
            "cost_assumptions": deps.cost_estimator.describe(),
        }

    @app.post("/rates/record")
    async def record_rate(request: Request) -> ORJSONResponse:
        deps = _deps(request)
        try:
            record = parse_rate_record(await request.body())
        except ValueError as exc:
            return ORJSONResponse(
                build_error_payload(ERROR_KIND_INVALID_REQUEST, str(exc)),
                status_code=STATUS_BAD_REQUEST,
            )
        cost = deps.cost_estimator.estimate_record(record)
        deps.rate_monitor.record(record.status_code, record.headers, record.endpoint, cost)
        return ORJSONResponse({"recorded": True, "estimated_cost_usd": cost})

    @app.get("/report", response_class=PlainTextResponse)
    async def report(request: Request) -> str:
        deps = _deps(request)
        relay_diagnostics = await deps.router.diagnostics()
        return build_report(
            relay_diagnostics,
            deps.rate_monitor.snapshot(),
            deps.cost_estimator.describe(),
            deps.recent_errors.entries(),
        )

    @app.post("/relay")
    async def relay(request: Request) -> ORJSONResponse:
        deps = _deps(request)
        try:
            text, attachments = parse_relay_body(await request.body())
        except ValueError as exc:
            return ORJSONResponse(
                build_error_payload(ERROR_KIND_INVALID_REQUEST, str(exc)),
                status_code=STATUS_BAD_REQUEST,
            )

        relay_request = deps.router.build_request(text, attachments)
        try:
            result = await deps.router.send(relay_request)
        except RelayError as exc:
            logger.warning("relay: %s failure: %s", exc.kind, exc)
            deps.recent_errors.append(f"Relay failed: {exc}")
            return ORJSONResponse(relay_error_payload(exc), status_code=status_for_error(exc))
        return ORJSONResponse(asdict(result))

    @app.post("/session/rotate")
    async def rotate_session(request: Request) -> dict[str, str]:
        deps = _deps(request)
        return {"session_key": deps.router.rotate_session()}

    return app


configure_logging()

app = create_app()


__all__ = ["app", "create_app"]
