from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional
from opnform_connector.integrations.opnform_types import Credential


class Action(BaseModel):
    integration: str
    operation: str
    params: Dict[str, Any] = Field(default_factory=dict)


class RunActionRequest(Action):
    pass


class AuthRequest(BaseModel):
    """Body carrying only the host credential."""
    auth: Credential


class WorkspaceOptionsRequest(BaseModel):
    auth: Optional[Credential] = None

    @field_validator("auth", mode="before")
    @classmethod
    def _empty_auth_is_unconnected(cls, v: Any) -> Any:
        # The host sends {} before an account is connected
        return None if v == {} else v


class FormOptionsRequest(WorkspaceOptionsRequest):
    model_config = ConfigDict(populate_by_name=True)

    workspace_id: Optional[str] = Field(default=None, alias="workspaceId")


class CreateIntegrationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    auth: Credential
    webhook_url: str = Field(alias="webhookUrl", min_length=1)
    flow_url: str = Field(alias="flowUrl", min_length=1)
    strict: bool = False


# API Response Envelopes
class ApiError(BaseModel):
    """Structured error response."""
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class ApiResponse(BaseModel):
    """Standard API response envelope."""
    ok: bool
    data: Optional[Any] = None
    error: Optional[ApiError] = None
    requestId: str = ""

    @classmethod
    def success(cls, data: Any = None, request_id: str = "") -> "ApiResponse":
        """Create a success response."""
        return cls(ok=True, data=data, requestId=request_id)

    @classmethod
    def failure(
        cls,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        request_id: str = "",
    ) -> "ApiResponse":
        """Create an error response."""
        return cls(
            ok=False,
            error=ApiError(code=code, message=message, details=details),
            requestId=request_id,
        )
