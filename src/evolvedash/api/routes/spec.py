"""
Spec document API routes.

- GET /api/spec - The spec document as JSON
- GET /api/workflows - Workflows in the spec document
- POST /api/workflows - Append a workflow definition
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from evolvedash.api.deps import get_services
from evolvedash.core.errors import ValidationError
from evolvedash.core.services import Services

router = APIRouter()


class WorkflowCreate(BaseModel):
    """Request body for POST /api/workflows."""

    name: str = ""
    description: str = ""
    schedule: str | None = None
    action: str | dict[str, Any] | list[Any] | None = None


@router.get("/spec")
def get_spec(services: Services = Depends(get_services)) -> dict[str, Any]:
    """
    Get the spec document.

    Raises:
        StoreError: 500 if the document is missing or unparsable
    """
    return services.spec_store.read_spec()


@router.get("/workflows")
def list_workflows(services: Services = Depends(get_services)) -> list[dict[str, Any]]:
    """
    List workflows from the spec document, oldest first.

    Raises:
        StoreError: 500 if the document is missing or unparsable
    """
    return services.spec_store.list_workflows()


@router.post("/workflows")
def create_workflow(
    body: WorkflowCreate,
    services: Services = Depends(get_services),
) -> dict[str, Any]:
    """
    Add a workflow to the spec document.

    Example response:
        {
          "success": true,
          "message": "Workflow 'Nightly report' added",
          "workflowId": "workflow_9a1b2c3d4e5f",
          "workflow": {"id": "workflow_9a1b2c3d4e5f", "trigger": {"type": "manual"}, ...}
        }
    """
    if not body.name.strip() or not body.description.strip():
        raise ValidationError("Workflow name and description are required")

    workflow = services.spec_store.add_workflow(
        body.name, body.description, schedule=body.schedule, action=body.action
    )
    services.oplog.add("info", "Workflow added", workflow_id=workflow["id"])
    return {
        "success": True,
        "message": f"Workflow '{workflow['name']}' added",
        "workflowId": workflow["id"],
        "workflow": workflow,
    }
