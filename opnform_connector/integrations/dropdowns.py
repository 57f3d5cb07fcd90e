"""
Option providers for the workspace and form dropdowns.

The form dropdown depends on the workspace selection; both degrade to a
disabled placeholder instead of raising.
"""
from __future__ import annotations
import logging
from typing import List, Optional
from opnform_connector.integrations.opnform_client import OpnformClient
from opnform_connector.integrations.opnform_types import (
    Credential,
    DropdownOption,
    DropdownState,
)

logger = logging.getLogger(__name__)

CONNECT_ACCOUNT = "Connect OpnForm account"
SELECT_WORKSPACE = "Select workspace"
SELECT_FORM = "Select form"


async def workspace_options(
    credential: Optional[Credential],
    log: Optional[logging.Logger] = None,
) -> DropdownState:
    log = log or logger
    if credential is None:
        return DropdownState.unavailable(CONNECT_ACCOUNT)

    try:
        workspaces = await OpnformClient(credential).list_workspaces()
    except Exception as e:
        log.warning(f"Failed to load workspaces: {e}")
        return DropdownState.unavailable(f"Failed to load workspaces: {e}")

    return DropdownState(
        disabled=False,
        placeholder=SELECT_WORKSPACE,
        options=[DropdownOption(label=w.name, value=w.id) for w in workspaces],
    )


async def form_options(
    credential: Optional[Credential],
    workspace_id: Optional[str],
    log: Optional[logging.Logger] = None,
) -> DropdownState:
    """
    Options for every form in the workspace, across all listing pages.

    Pages are fetched strictly in order; a page without `data` ends the walk
    and whatever was collected so far is returned.
    """
    log = log or logger
    if credential is None:
        return DropdownState.unavailable(CONNECT_ACCOUNT)
    if not workspace_id:
        return DropdownState.unavailable(SELECT_WORKSPACE)

    options: List[DropdownOption] = []
    try:
        client = OpnformClient(credential)
        async for page in client.iter_form_pages(workspace_id):
            options.extend(DropdownOption(label=f.title, value=f.id) for f in page.data)
    except Exception as e:
        log.warning(
            f"Failed to load forms: {e}",
            extra={"workspace_id": workspace_id},
        )
        return DropdownState.unavailable(f"Failed to load forms: {e}")

    return DropdownState(disabled=False, placeholder=SELECT_FORM, options=options)
