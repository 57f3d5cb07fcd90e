from __future__ import annotations
import logging
from typing import Optional
from opnform_connector.integrations.opnform_client import OpnformClient
from opnform_connector.integrations.opnform_types import Credential

logger = logging.getLogger(__name__)


async def validate_auth(credential: Credential, log: Optional[logging.Logger] = None) -> bool:
    """Probe the workspace listing; the key is valid only on a 200."""
    log = log or logger
    try:
        response = await OpnformClient(credential).send("GET", "/open/workspaces")
    except Exception as e:
        log.info(f"OpnForm auth probe failed: {e}")
        return False

    if response.status != 200:
        log.info(f"OpnForm auth probe rejected with status {response.status}")
    return response.status == 200
