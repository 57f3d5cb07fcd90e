"""
Prometheus metrics for the OpnForm connector.
"""
import os
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator


opnform_requests_total = Counter(
    "opnform_requests_total",
    "Outbound OpnForm API calls by method and status class",
    ["method", "status"],
)

form_pages_fetched_total = Counter(
    "opnform_form_pages_fetched_total",
    "Form listing pages fetched while resolving the form dropdown",
)

integration_dedup_hits_total = Counter(
    "opnform_integration_dedup_hits_total",
    "Create calls short-circuited by an existing integration",
)


def status_class(status_code: int | None) -> str:
    """Bucket a status code as 2xx/4xx/5xx, or 'error' when no response arrived."""
    if status_code is None:
        return "error"
    return f"{status_code // 100}xx"


def setup_metrics(app):
    """
    Instrument the FastAPI app and expose /metrics.
    Only enabled when METRICS_ENABLED is true.
    """
    metrics_enabled = os.getenv("METRICS_ENABLED", "").lower() in ("true", "1", "yes")

    if not metrics_enabled:
        return

    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics", "/healthz", "/readyz"],
        inprogress_name="http_requests_inprogress",
        inprogress_labels=True,
    )

    instrumentator.instrument(app).expose(app, include_in_schema=False, tags=["observability"])
