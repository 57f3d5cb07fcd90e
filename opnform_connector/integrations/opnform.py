from __future__ import annotations
from typing import Dict, Any, Optional
import logging
from pydantic import ValidationError
from opnform_connector.integrations.base import Integration, register_integration
from opnform_connector.integrations.opnform_client import OpnformAPIError
from opnform_connector.integrations.opnform_types import Credential
from opnform_connector.integrations.auth import validate_auth
from opnform_connector.integrations.dropdowns import workspace_options, form_options
from opnform_connector.integrations import form_integrations

logger = logging.getLogger(__name__)


def _validation_error(message: str) -> Dict[str, Any]:
    return {"ok": False, "error": {"code": "validation_error", "message": message}}


def _parse_flag(raw: Any) -> Optional[bool]:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().lower() in ("true", "false"):
        return raw.strip().lower() == "true"
    return None


def _parse_id(raw: Any) -> Optional[int]:
    """Integer ids only; floats and other strings are rejected, not truncated."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None


def parse_credential(raw: Any) -> Optional[Credential]:
    """Validate the host-supplied auth object; None means not connected."""
    if raw is None or raw == {}:
        return None
    if isinstance(raw, Credential):
        return raw
    return Credential.model_validate(raw)


@register_integration("opnform")
class OpnformIntegration(Integration):
    """
    OpnForm operations addressable by name.
    Each call carries its own credential under params["auth"].
    """

    def operations(self) -> list[str]:
        return [
            "validate_auth",
            "list_workspaces",
            "list_forms",
            "check_integration",
            "create_integration",
            "delete_integration",
        ]

    async def execute(self, operation: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            credential = parse_credential(params.get("auth"))
        except ValidationError as e:
            return _validation_error(f"Invalid auth: {e.errors()[0]['msg']}")

        try:
            if operation == "list_workspaces":
                state = await workspace_options(credential)
                return {"ok": True, **state.model_dump()}

            if operation == "list_forms":
                state = await form_options(credential, params.get("workspaceId"))
                return {"ok": True, **state.model_dump()}

            if operation not in self.operations():
                return {
                    "ok": False,
                    "error": {
                        "code": "not_found",
                        "message": f"Unknown operation: {operation}",
                    },
                }

            if credential is None:
                return {
                    "ok": False,
                    "error": {
                        "code": "unauthorized",
                        "message": "OpnForm credential required",
                    },
                }

            if operation == "validate_auth":
                return {"ok": True, "valid": await validate_auth(credential)}

            form_id = params.get("formId")
            if not form_id:
                return _validation_error("formId required")

            if operation == "check_integration":
                flow_url = params.get("flowUrl")
                if not flow_url:
                    return _validation_error("formId and flowUrl required")
                integration_id = await form_integrations.check_exists_integration(
                    credential, form_id, flow_url
                )
                return {"ok": True, "integrationId": integration_id}

            if operation == "create_integration":
                webhook_url = params.get("webhookUrl")
                flow_url = params.get("flowUrl")
                if not webhook_url or not flow_url:
                    return _validation_error("formId, webhookUrl and flowUrl required")
                strict = _parse_flag(params.get("strict", False))
                if strict is None:
                    return _validation_error("strict must be a boolean")
                integration_id = await form_integrations.create_integration(
                    credential,
                    form_id,
                    webhook_url,
                    flow_url,
                    strict=strict,
                )
                return {"ok": True, "integrationId": integration_id}

            # delete_integration
            integration_id = _parse_id(params.get("integrationId"))
            if integration_id is None:
                return _validation_error("formId and numeric integrationId required")
            response = await form_integrations.delete_integration(
                credential, form_id, integration_id
            )
            return {"ok": True, "deleted": True, "status": response.status}

        except OpnformAPIError as e:
            return {
                "ok": False,
                "error": {
                    "code": e.code,
                    "message": e.message,
                    "status_code": e.status_code,
                },
            }
        except Exception as e:
            logger.error(f"OpnForm operation failed: {e}", exc_info=True)
            return {
                "ok": False,
                "error": {
                    "code": "internal_error",
                    "message": str(e),
                },
            }
