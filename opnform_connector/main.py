from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from dotenv import load_dotenv
import time
import logging
from opnform_connector.utils.logging import configure_logging
from opnform_connector.utils.ids import request_id as get_request_id
from opnform_connector.config import settings
from opnform_connector.routes import actions as actions_routes
from opnform_connector.routes import opnform as opnform_routes
from opnform_connector.integrations import opnform as _opnform_integration  # noqa: F401  registers "opnform"
from opnform_connector.integrations.base import list_integrations
from opnform_connector.models import ApiResponse
from opnform_connector.observability.metrics import setup_metrics

load_dotenv()
configure_logging()

logger = logging.getLogger(__name__)

app = FastAPI(title="OpnForm Connector", version="0.1")

setup_metrics(app)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request id to every request/response and log timing."""

    async def dispatch(self, request: Request, call_next):
        req_id = get_request_id(request.headers.get("x-request-id"))
        request.state.request_id = req_id

        start_time = time.time()
        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={"request_id": req_id, "path": request.url.path},
        )

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Request completed: {request.method} {request.url.path} status={response.status_code}",
            extra={
                "request_id": req_id,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )

        response.headers["X-Request-ID"] = req_id
        return response


app.add_middleware(RequestIDMiddleware)

origins = [s.strip() for s in settings.CORS_ORIGINS.split(",") if s.strip()]
if not origins:
    origins = ["http://localhost:3000", "http://localhost:8080"]
    logger.info("CORS_ORIGINS not set, using defaults: localhost:3000, localhost:8080")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
async def health(request: Request):
    """Basic health check."""
    req_id = get_request_id(request.headers.get("x-request-id"))
    return ApiResponse.success(data={"status": "healthy"}, request_id=req_id)


@app.get("/readyz")
async def readiness(request: Request):
    """Readiness: the OpnForm host is configured and the integration is registered."""
    req_id = get_request_id(request.headers.get("x-request-id"))

    checks = {
        "opnform_base_url": "configured" if settings.OPNFORM_BASE_URL else "missing",
        "integration": "registered" if "opnform" in list_integrations() else "missing",
    }
    all_ready = checks["opnform_base_url"] == "configured" and checks["integration"] == "registered"

    return ApiResponse.success(
        data={
            "ready": all_ready,
            "checks": checks,
        },
        request_id=req_id,
    )


app.include_router(actions_routes.router)
app.include_router(opnform_routes.router)
