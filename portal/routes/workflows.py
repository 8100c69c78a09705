import json
import logging
from typing import Any, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from .. import config
from ..auth import get_current_user
from ..models import User
from ..webhook_security import N8N_SIGNATURE_HEADER, compute_hmac_sha256

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workflows", tags=["Workflows"])


class WorkflowTriggerRequest(BaseModel):
    workflow_id: str
    workflow_name: str
    action: str
    input_data: Optional[dict[str, Any]] = None


def default_customer_name(user: User) -> str:
    """Name the assistant greets with: full name, company, email local part, else "Kunde" """
    if user.full_name:
        return user.full_name
    if user.company_name:
        return user.company_name
    if user.email and user.email.split("@")[0]:
        return user.email.split("@")[0]
    return "Kunde"


async def send_workflow_request(url: str, body: bytes, headers: dict) -> httpx.Response:
    async with httpx.AsyncClient(timeout=config.N8N_REQUEST_TIMEOUT) as http_client:
        return await http_client.post(url, content=body, headers=headers)


@router.post("/trigger")
async def trigger_workflow(
    data: WorkflowTriggerRequest,
    current_user: User = Depends(get_current_user),
):
    """Start an n8n workflow (e.g. phone assistant setup) for the current account"""
    if not config.N8N_WORKFLOW_WEBHOOK_URL:
        logger.error("N8N_WORKFLOW_WEBHOOK_URL not configured")
        raise HTTPException(status_code=503, detail="Workflow service not configured")

    input_data = dict(data.input_data or {})
    if not input_data.get("customer_name"):
        input_data["customer_name"] = default_customer_name(current_user)

    payload = {
        "workflow_id": data.workflow_id,
        "workflow_name": data.workflow_name,
        "action": data.action,
        "user_id": current_user.id,
        "user_email": current_user.email,
        "input_data": input_data,
    }
    body = json.dumps(payload).encode("utf-8")
    headers = {"Content-Type": "application/json"}
    if config.N8N_WEBHOOK_SECRET:
        headers[N8N_SIGNATURE_HEADER] = f"sha256={compute_hmac_sha256(config.N8N_WEBHOOK_SECRET, body)}"

    try:
        response = await send_workflow_request(config.N8N_WORKFLOW_WEBHOOK_URL, body, headers)
    except httpx.HTTPError as e:
        logger.error(f"Workflow {data.workflow_id} request failed: {e}")
        raise HTTPException(status_code=502, detail="Workflow service unreachable") from e

    if response.status_code >= 400:
        logger.error(
            f"Workflow {data.workflow_id} rejected by n8n: {response.status_code} {response.text}"
        )
        raise HTTPException(status_code=502, detail="Workflow service returned an error")

    logger.info(f"Workflow {data.workflow_id} triggered for user {current_user.id}")

    try:
        result = response.json()
    except ValueError:
        result = response.text or None

    return {"success": True, "workflow_id": data.workflow_id, "response": result}
