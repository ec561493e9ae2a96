"""
The jwt provider: resource type registry plus the lifecycle host that validates config,
plans changes and drives create/read/delete, persisting state between calls.

Resources have no update. Any change to a configured attribute replaces the resource
(destroy, then create); if the create fails the resource is left absent.
"""
import logging
from dataclasses import dataclass, field

from sqlalchemy.orm import Session

from jwt_provider.audit import (
    EVENT_APPLY_FAILED,
    EVENT_RESOURCE_CREATED,
    EVENT_RESOURCE_DESTROYED,
    EVENT_RESOURCE_REPLACED,
    OUTCOME_FAIL,
    log_audit,
)
from jwt_provider.config import PROVIDER_NAME, PROVIDER_VERSION
from jwt_provider.errors import InvalidAttribute, ProviderError, ResourceNotFound, UnknownResourceType
from jwt_provider.hashed_token import HashedTokenResource
from jwt_provider.resource import Resource, ResourceData
from jwt_provider.schema import TYPE_STRING, SENSITIVE_MARKER, apply_defaults, describe_schema, input_names, redact
from jwt_provider.state import get_state, parse_address, remove_state, save_state

logger = logging.getLogger(__name__)

ACTION_CREATE = "create"
ACTION_NOOP = "noop"
ACTION_REPLACE = "replace"

KNOWN_AFTER_APPLY = "(known after apply)"

RESOURCES: dict[str, Resource] = {r.type_name: r for r in (HashedTokenResource(),)}


def get_resource(type_name: str) -> Resource:
    resource = RESOURCES.get(type_name)
    if resource is None:
        raise UnknownResourceType(f"Provider {PROVIDER_NAME} has no resource type {type_name!r}.")
    return resource


def provider_schema() -> dict:
    return {
        "provider": {"name": PROVIDER_NAME, "version": PROVIDER_VERSION},
        "resource_schemas": {
            name: {"description": r.description, "attributes": describe_schema(r.schema)}
            for name, r in RESOURCES.items()
        },
    }


def validate_resource_config(type_name: str, raw) -> tuple[list[str], list[ProviderError]]:
    """
    Check raw config against the resource schema and run attribute validators.
    Returns (warnings, errors); config problems never raise.
    """
    resource = get_resource(type_name)
    schema = resource.schema
    warnings: list[str] = []
    errors: list[ProviderError] = []
    if not isinstance(raw, dict):
        errors.append(InvalidAttribute("Configuration must be an object of attribute values."))
        return warnings, errors

    for key in raw:
        attr = schema.get(key)
        if attr is None:
            errors.append(InvalidAttribute(f"{key} is not an attribute of {type_name}.", attribute=key))
        elif attr.computed:
            errors.append(InvalidAttribute(f"{key} is computed and cannot be configured.", attribute=key))

    values = apply_defaults(schema, {k: v for k, v in raw.items() if k in schema})
    for key, attr in schema.items():
        if attr.computed:
            continue
        value = values.get(key)
        if value is None:
            if attr.required:
                errors.append(InvalidAttribute(f"{key} is required.", attribute=key))
            continue
        if attr.type == TYPE_STRING and not isinstance(value, str):
            errors.append(InvalidAttribute(f"{key} must be a string.", attribute=key))
            continue
        if attr.validate_func is not None:
            w, e = attr.validate_func(value, key)
            warnings.extend(w)
            errors.extend(e)
    return warnings, errors


@dataclass
class Plan:
    address: str
    resource_type: str
    action: str
    # name -> {"before": ..., "after": ...}, sensitive values redacted
    changes: dict = field(default_factory=dict)
    forces_replacement: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "resource_type": self.resource_type,
            "action": self.action,
            "changes": self.changes,
            "forces_replacement": self.forces_replacement,
        }


def plan(address: str, prior: dict | None, raw: dict) -> Plan:
    """Diff configured inputs against prior state. Config must already be valid."""
    type_name, _ = parse_address(address)
    resource = get_resource(type_name)
    schema = resource.schema
    desired = apply_defaults(schema, raw)

    if prior is None:
        after = redact(schema, {k: desired.get(k) for k in input_names(schema)})
        changes = {k: {"before": None, "after": v} for k, v in after.items()}
        for name, attr in schema.items():
            if attr.computed:
                changes[name] = {"before": None, "after": KNOWN_AFTER_APPLY}
        return Plan(address, type_name, ACTION_CREATE, changes=changes)

    changed = [k for k in input_names(schema) if prior.get(k) != desired.get(k)]
    if not changed:
        return Plan(address, type_name, ACTION_NOOP)

    before = redact(schema, prior)
    after = redact(schema, desired)
    changes = {}
    for k in changed:
        if schema[k].sensitive:
            # Both sides show the marker; say which side changed without showing values.
            changes[k] = {"before": SENSITIVE_MARKER, "after": SENSITIVE_MARKER}
        else:
            changes[k] = {"before": before.get(k), "after": after.get(k)}
    for name, attr in schema.items():
        if attr.computed:
            changes[name] = {"before": before.get(name), "after": KNOWN_AFTER_APPLY}
    forces = [k for k in changed if schema[k].force_new]
    return Plan(address, type_name, ACTION_REPLACE, changes=changes, forces_replacement=forces)


def _raise_first(errors: list[ProviderError]) -> None:
    if errors:
        raise errors[0]


def _create(db: Session, address: str, resource: Resource, raw: dict):
    data = ResourceData(resource.schema, raw)
    resource.create(data)
    if not data.id:
        raise ProviderError(f"{resource.type_name} create returned without setting an id.")
    return save_state(db, address, resource.type_name, data.id, data.attributes)


def _delete(db: Session, address: str, resource: Resource, row) -> None:
    data = ResourceData(resource.schema, row.get_attributes(), resource_id=row.resource_id)
    resource.delete(data)
    remove_state(db, address)
    # Flush so a following save_state in the same session inserts a fresh row.
    db.flush()


def plan_address(db: Session, address: str, raw) -> Plan:
    """Validate then plan against stored state."""
    type_name, _ = parse_address(address)
    _, errors = validate_resource_config(type_name, raw)
    _raise_first(errors)
    row = get_state(db, address)
    return plan(address, row.get_attributes() if row else None, raw)


def apply(db: Session, address: str, raw):
    """
    Bring address in line with raw config. Returns (plan, state row).
    Raises the first validation or lifecycle error; nothing partial is persisted.
    """
    type_name, _ = parse_address(address)
    resource = get_resource(type_name)
    current_plan = plan_address(db, address, raw)
    row = get_state(db, address)

    if current_plan.action == ACTION_NOOP:
        data = ResourceData(resource.schema, row.get_attributes(), resource_id=row.resource_id)
        resource.read(data)
        return current_plan, row

    try:
        if current_plan.action == ACTION_REPLACE:
            _delete(db, address, resource, row)
            logger.info("Destroyed %s for replacement (forced by: %s)", address, ", ".join(current_plan.forces_replacement))
        row = _create(db, address, resource, raw)
        db.commit()
    except ProviderError as e:
        db.rollback()
        if current_plan.action == ACTION_REPLACE:
            # Prior instance is destroyed before create; the address is now absent.
            remove_state(db, address)
            db.commit()
        logger.warning("Apply failed for %s: %s", address, e.error)
        log_audit(db, EVENT_APPLY_FAILED, address=address, resource_type=type_name, outcome=OUTCOME_FAIL, detail=e.error)
        raise

    event = EVENT_RESOURCE_REPLACED if current_plan.action == ACTION_REPLACE else EVENT_RESOURCE_CREATED
    log_audit(db, event, address=address, resource_type=type_name)
    logger.info("Applied %s (%s) id=%s", address, current_plan.action, row.resource_id)
    return current_plan, row


def refresh(db: Session, address: str):
    """Run read against stored state; drops the state if read cleared the id."""
    type_name, _ = parse_address(address)
    resource = get_resource(type_name)
    row = get_state(db, address)
    if row is None:
        raise ResourceNotFound(f"{address} is not in state.")
    data = ResourceData(resource.schema, row.get_attributes(), resource_id=row.resource_id)
    resource.read(data)
    if not data.id:
        remove_state(db, address)
        db.commit()
        logger.info("%s no longer exists; removed from state", address)
        return None
    return row


def destroy(db: Session, address: str) -> None:
    type_name, _ = parse_address(address)
    resource = get_resource(type_name)
    row = get_state(db, address)
    if row is None:
        raise ResourceNotFound(f"{address} is not in state.")
    _delete(db, address, resource, row)
    db.commit()
    log_audit(db, EVENT_RESOURCE_DESTROYED, address=address, resource_type=type_name)
    logger.info("Destroyed %s", address)
