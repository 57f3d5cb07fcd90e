"""
Host-facing OpnForm endpoints: auth probe, dropdown options and the
per-form webhook integration.
"""
from fastapi import APIRouter, Request
import logging
from opnform_connector.models import (
    ApiResponse,
    AuthRequest,
    WorkspaceOptionsRequest,
    FormOptionsRequest,
    CreateIntegrationRequest,
)
from opnform_connector.integrations.auth import validate_auth
from opnform_connector.integrations.dropdowns import workspace_options, form_options
from opnform_connector.integrations import form_integrations
from opnform_connector.integrations.opnform_client import OpnformAPIError
from opnform_connector.utils.ids import request_id as get_request_id

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/opnform", tags=["opnform"])


def _api_failure(e: Exception, req_id: str) -> ApiResponse:
    if isinstance(e, OpnformAPIError):
        return ApiResponse.failure(
            code=e.code,
            message=e.message,
            details={"status_code": e.status_code},
            request_id=req_id,
        )
    logger.error(f"OpnForm request failed: {e}", exc_info=True, extra={"request_id": req_id})
    return ApiResponse.failure(code="internal_error", message=str(e), request_id=req_id)


@router.post("/auth/validate")
async def validate(request: Request, req: AuthRequest):
    """Check that the API key is accepted by OpnForm."""
    req_id = get_request_id(request.headers.get("x-request-id"))
    valid = await validate_auth(req.auth)
    return ApiResponse.success(data={"valid": valid}, request_id=req_id)


@router.post("/options/workspaces")
async def workspaces(request: Request, req: WorkspaceOptionsRequest):
    req_id = get_request_id(request.headers.get("x-request-id"))
    state = await workspace_options(req.auth)
    return ApiResponse.success(data=state.model_dump(), request_id=req_id)


@router.post("/options/forms")
async def forms(request: Request, req: FormOptionsRequest):
    req_id = get_request_id(request.headers.get("x-request-id"))
    state = await form_options(req.auth, req.workspace_id)
    return ApiResponse.success(data=state.model_dump(), request_id=req_id)


@router.post("/forms/{form_id}/integrations")
async def create_integration(request: Request, form_id: str, req: CreateIntegrationRequest):
    """Register the flow's webhook on the form; returns the existing id if already registered."""
    req_id = get_request_id(request.headers.get("x-request-id"))

    try:
        integration_id = await form_integrations.create_integration(
            req.auth,
            form_id,
            req.webhook_url,
            req.flow_url,
            strict=req.strict,
        )
    except Exception as e:
        return _api_failure(e, req_id)

    return ApiResponse.success(data={"integrationId": integration_id}, request_id=req_id)


@router.delete("/forms/{form_id}/integrations/{integration_id}")
async def delete_integration(
    request: Request, form_id: str, integration_id: int, req: AuthRequest
):
    req_id = get_request_id(request.headers.get("x-request-id"))

    try:
        response = await form_integrations.delete_integration(req.auth, form_id, integration_id)
    except Exception as e:
        return _api_failure(e, req_id)

    return ApiResponse.success(
        data={"deleted": True, "status": response.status},
        request_id=req_id,
    )
