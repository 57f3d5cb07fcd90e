from fastapi import APIRouter, Request
from opnform_connector.models import RunActionRequest, ApiResponse
from opnform_connector.integrations.base import get_integration, list_integrations
from opnform_connector.utils.ids import request_id as get_request_id

router = APIRouter()


@router.get("/actions")
async def list_actions(request: Request):
    """List registered integrations and the operations each one accepts."""
    req_id = get_request_id(request.headers.get("x-request-id"))
    data = {name: get_integration(name).operations() for name in list_integrations()}
    return ApiResponse.success(data=data, request_id=req_id)


@router.post("/actions/run")
async def run_action(request: Request, req: RunActionRequest):
    """Execute an operation on a registered integration."""
    req_id = get_request_id(request.headers.get("x-request-id"))

    try:
        integ = get_integration(req.integration)
        result = await integ.execute(req.operation, req.params)

        # Integrations already return {ok, ...} envelopes
        if isinstance(result, dict) and "ok" in result:
            result["requestId"] = req_id
            return result
        else:
            return ApiResponse.success(data=result, request_id=req_id)

    except ValueError as e:
        return ApiResponse.failure(
            code="not_found",
            message=str(e),
            request_id=req_id,
        )
    except Exception as e:
        return ApiResponse.failure(
            code="internal_error",
            message=str(e),
            request_id=req_id,
        )
