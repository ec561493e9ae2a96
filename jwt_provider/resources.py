"""
HTTP surface of the lifecycle host: schema, validate, plan, apply, refresh and destroy.
Sensitive attribute values are redacted unless show_sensitive is requested explicitly.
"""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from jwt_provider import provider
from jwt_provider.database import get_db
from jwt_provider.models import ResourceState
from jwt_provider.schema import redact
from jwt_provider.state import list_states

logger = logging.getLogger(__name__)
router = APIRouter()


def _state_view(row: ResourceState, show_sensitive: bool = False) -> dict:
    attributes = row.get_attributes()
    if not show_sensitive:
        attributes = redact(provider.get_resource(row.resource_type).schema, attributes)
    return {
        "address": row.address,
        "resource_type": row.resource_type,
        "id": row.resource_id,
        "attributes": attributes,
    }


@router.get("/schema")
def schema():
    """Provider and resource schemas (attribute types, flags, descriptions)."""
    return provider.provider_schema()


@router.post("/validate/{resource_type}")
def validate(resource_type: str, config: Any = Body(..., embed=True)):
    """Config-time validation. Always 200 for a known resource type; errors are listed."""
    warnings, errors = provider.validate_resource_config(resource_type, config)
    return {
        "valid": not errors,
        "warnings": warnings,
        "errors": [
            {"error": e.error, "attribute": e.attribute, "error_description": e.message} for e in errors
        ],
    }


@router.post("/plan/{address}")
def plan(address: str, config: Any = Body(..., embed=True), db: Session = Depends(get_db)):
    return provider.plan_address(db, address, config).to_dict()


@router.put("/resources/{address}")
def apply(address: str, config: Any = Body(..., embed=True), db: Session = Depends(get_db)):
    """Create, keep or replace the resource at address so it matches config."""
    applied_plan, row = provider.apply(db, address, config)
    response = _state_view(row)
    response["action"] = applied_plan.action
    return response


@router.get("/resources")
def list_resources(db: Session = Depends(get_db)):
    return [_state_view(row) for row in list_states(db)]


@router.get("/resources/{address}")
def read(address: str, show_sensitive: bool = False, db: Session = Depends(get_db)):
    """Refresh and return stored state. 404 if the address is absent."""
    row = provider.refresh(db, address)
    if row is None:
        return {"address": address, "id": None, "attributes": None}
    if show_sensitive:
        logger.info("Sensitive attributes of %s requested", address)
    return _state_view(row, show_sensitive=show_sensitive)


@router.delete("/resources/{address}")
def destroy(address: str, db: Session = Depends(get_db)):
    provider.destroy(db, address)
    return {"address": address, "destroyed": True}
