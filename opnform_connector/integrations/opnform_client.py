"""
Async OpnForm API client with error mapping.
"""
import logging
from typing import Any, AsyncIterator, Dict, List, Optional
import httpx
from pydantic import ValidationError
from opnform_connector.utils.http import create_http_client
from opnform_connector.integrations.opnform_types import (
    Credential,
    Workspace,
    FormPage,
    FormIntegration,
    IntegrationCreate,
    OpnformResponse,
)
from opnform_connector.observability.metrics import (
    opnform_requests_total,
    form_pages_fetched_total,
    status_class,
)
from opnform_connector.config import settings

logger = logging.getLogger(__name__)


class OpnformAPIError(Exception):
    """Base exception for OpnForm API errors."""
    def __init__(self, code: str, message: str, status_code: int = 500):
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class OpnformClient:
    """Async OpnForm API client bound to one credential."""

    def __init__(
        self,
        credential: Credential,
        timeout: Optional[float] = None,
    ):
        self.credential = credential
        self.base_url = (credential.base_api_url or settings.OPNFORM_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.OPNFORM_TIMEOUT

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.credential.api_key}"}

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Any] = None,
    ) -> OpnformResponse:
        """
        Issue one request and return status + parsed body for any HTTP status.
        Transport failures raise OpnformAPIError("transport_error").
        """
        url = f"{self.base_url}{path}"
        headers = self._auth_headers()
        if json_body is not None:
            headers["Content-Type"] = "application/json"

        try:
            async with create_http_client(timeout=self.timeout) as client:
                response = await client.request(
                    method.upper(),
                    url,
                    headers=headers,
                    params=params,
                    json=json_body,
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            opnform_requests_total.labels(method=method.upper(), status=status_class(None)).inc()
            logger.warning(f"OpnForm {method.upper()} {path} failed: {e}")
            raise OpnformAPIError(
                "transport_error",
                f"OpnForm request failed: {e}",
                502,
            ) from e

        opnform_requests_total.labels(
            method=method.upper(), status=status_class(response.status_code)
        ).inc()
        logger.debug(f"OpnForm {method.upper()} {path} -> {response.status_code}")
        return OpnformResponse(status=response.status_code, body=self._parse_body(response))

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Any] = None,
    ) -> OpnformResponse:
        """
        Like send(), but non-2xx responses raise OpnformAPIError with a mapped code.
        """
        response = await self.send(method, path, params=params, json_body=json_body)
        status = response.status

        if 200 <= status < 300:
            return response

        if status == 401:
            raise OpnformAPIError("unauthorized", "Invalid OpnForm API key", 401)

        if status == 403:
            raise OpnformAPIError(
                "forbidden",
                "Insufficient permissions for this operation",
                403,
            )

        if status == 404:
            raise OpnformAPIError("not_found", "Resource not found", 404)

        if status in (400, 422):
            body = response.body if isinstance(response.body, dict) else {"message": response.body}
            raise OpnformAPIError(
                "validation_error",
                f"Bad request: {body.get('message') or 'Unknown error'}",
                status,
            )

        if status == 429:
            raise OpnformAPIError("rate_limited", "OpnForm API rate limit exceeded", 429)

        if status >= 500:
            raise OpnformAPIError(
                "upstream_error",
                f"OpnForm server error: {status}",
                status,
            )

        raise OpnformAPIError("http_error", f"Unexpected OpnForm status: {status}", status)

    async def list_workspaces(self) -> List[Workspace]:
        """List workspaces visible to the API key."""
        response = await self.request("GET", "/open/workspaces")
        return [Workspace(**w) for w in response.body or []]

    async def list_forms_page(self, workspace_id: str, page: int = 1) -> FormPage:
        """Fetch a single page of forms in a workspace."""
        response = await self.request(
            "GET",
            f"/open/workspaces/{workspace_id}/forms",
            params={"page": str(page)},
        )
        form_pages_fetched_total.inc()
        body = response.body if isinstance(response.body, dict) else {}
        return FormPage(**body)

    async def iter_form_pages(self, workspace_id: str) -> AsyncIterator[FormPage]:
        """
        Lazily walk the form listing from page 1, one request per page.

        Stops on a page without `data` (not yielded), on a page without
        `meta`, or once current_page reaches last_page.
        """
        page_number = 1
        while True:
            page = await self.list_forms_page(workspace_id, page_number)
            if page.data is None:
                return
            yield page
            if page.is_last:
                return
            page_number += 1

    async def list_integrations(self, form_id: str) -> List[FormIntegration]:
        """List integrations attached to a form."""
        response = await self.request("GET", f"/open/forms/{form_id}/integrations")
        integrations = []
        for raw in response.body or []:
            # Records owned by other providers may not fit our model
            try:
                integrations.append(FormIntegration.model_validate(raw))
            except ValidationError as e:
                logger.debug(f"Skipping unreadable integration record on form {form_id}: {e}")
        return integrations

    async def create_integration(self, form_id: str, body: IntegrationCreate) -> OpnformResponse:
        """Attach an integration to a form."""
        return await self.request(
            "POST",
            f"/open/forms/{form_id}/integrations",
            json_body=body.model_dump(),
        )

    async def delete_integration(self, form_id: str, integration_id: int) -> OpnformResponse:
        """Remove an integration from a form."""
        return await self.request(
            "DELETE",
            f"/open/forms/{form_id}/integrations/{integration_id}",
        )
