"""
Webhook integration lifecycle on an OpnForm form.

An integration is ours when its integration_id is the configured provider id
and its stored provider_url equals the flow url; the numeric id OpnForm
assigns is only used for deletion.
"""
from __future__ import annotations
import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional
from opnform_connector.config import settings
from opnform_connector.integrations.opnform_client import OpnformClient, OpnformAPIError
from opnform_connector.integrations.opnform_types import (
    Credential,
    IntegrationCreate,
    IntegrationData,
    OpnformResponse,
)
from opnform_connector.observability.metrics import integration_dedup_hits_total

logger = logging.getLogger(__name__)


class IntegrationCreationError(OpnformAPIError):
    """OpnForm accepted the create call but returned no integration id."""
    def __init__(self, message: str = "Failed to get integration ID from response"):
        super().__init__("integration_creation_failed", message, 502)


class LookupStatus(str, enum.Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class IntegrationLookup:
    status: LookupStatus
    integration_id: Optional[int] = None
    cause: Optional[BaseException] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND


async def lookup_integration(
    credential: Credential,
    form_id: str,
    flow_url: str,
    log: Optional[logging.Logger] = None,
) -> IntegrationLookup:
    """Scan the form's integrations for one registered by this flow."""
    log = log or logger
    try:
        integrations = await OpnformClient(credential).list_integrations(form_id)
    except Exception as e:
        log.warning(
            f"Error checking existing integration: {e}",
            extra={"form_id": form_id},
        )
        return IntegrationLookup(LookupStatus.FAILED, cause=e)

    for integration in integrations:
        if (
            integration.integration_id == settings.OPNFORM_INTEGRATION_ID
            and integration.data is not None
            and integration.data.provider_url == flow_url
        ):
            return IntegrationLookup(LookupStatus.FOUND, integration_id=integration.id)
    return IntegrationLookup(LookupStatus.NOT_FOUND)


async def check_exists_integration(
    credential: Credential,
    form_id: str,
    flow_url: str,
    log: Optional[logging.Logger] = None,
) -> Optional[int]:
    """Id of the flow's integration, or None when absent or the lookup failed."""
    result = await lookup_integration(credential, form_id, flow_url, log=log)
    return result.integration_id if result.found else None


def _created_id(body: Any) -> Optional[int]:
    if not isinstance(body, dict):
        return None
    form_integration = body.get("form_integration")
    if not isinstance(form_integration, dict):
        return None
    integration_id = form_integration.get("id")
    if isinstance(integration_id, bool) or not isinstance(integration_id, int):
        return None
    return integration_id or None


async def create_integration(
    credential: Credential,
    form_id: str,
    webhook_url: str,
    flow_url: str,
    strict: bool = False,
    log: Optional[logging.Logger] = None,
) -> int:
    """
    Register the flow's webhook on a form, reusing an existing registration.

    With strict=True a failed lookup raises instead of falling through to
    a POST that may duplicate an integration OpnForm already holds.
    Request failures of the POST itself always propagate.
    """
    log = log or logger
    lookup = await lookup_integration(credential, form_id, flow_url, log=log)
    if lookup.found:
        integration_dedup_hits_total.inc()
        log.info(
            f"Integration already exists with ID: {lookup.integration_id}",
            extra={"form_id": form_id, "integration_id": lookup.integration_id},
        )
        return lookup.integration_id
    if lookup.status is LookupStatus.FAILED and strict:
        raise lookup.cause

    body = IntegrationCreate(
        integration_id=settings.OPNFORM_INTEGRATION_ID,
        status="active",
        data=IntegrationData(webhook_url=webhook_url, provider_url=flow_url),
    )
    try:
        response = await OpnformClient(credential).create_integration(form_id, body)
        integration_id = _created_id(response.body)
        if integration_id is None:
            raise IntegrationCreationError()
    except Exception as e:
        log.error(f"Error creating integration: {e}", extra={"form_id": form_id})
        raise

    log.info(
        f"Integration created with ID: {integration_id}",
        extra={"form_id": form_id, "integration_id": integration_id},
    )
    return integration_id


async def delete_integration(
    credential: Credential,
    form_id: str,
    integration_id: int,
    log: Optional[logging.Logger] = None,
) -> OpnformResponse:
    log = log or logger
    try:
        response = await OpnformClient(credential).delete_integration(form_id, integration_id)
    except Exception as e:
        log.error(
            f"Error deleting integration {integration_id}: {e}",
            extra={"form_id": form_id, "integration_id": integration_id},
        )
        raise

    log.info(
        f"Integration deleted with ID: {integration_id}",
        extra={"form_id": form_id, "integration_id": integration_id},
    )
    return response
