"""
Persistence of resource state, keyed by address (<resource_type>.<name>).
"""
import logging
import re

from sqlalchemy.orm import Session

from jwt_provider.errors import InvalidAddress
from jwt_provider.models import ResourceState

logger = logging.getLogger(__name__)

_ADDRESS_RE = re.compile(r"^([a-z][a-z0-9_]*)\.([A-Za-z_][A-Za-z0-9_-]*)$")


def parse_address(address: str) -> tuple[str, str]:
    """Split 'jwt_hashed_token.api' into ('jwt_hashed_token', 'api')."""
    m = _ADDRESS_RE.match(address or "")
    if not m:
        raise InvalidAddress(f"{address!r} is not a resource address of the form <resource_type>.<name>.")
    return m.group(1), m.group(2)


def get_state(db: Session, address: str) -> ResourceState | None:
    return db.query(ResourceState).filter(ResourceState.address == address).first()


def list_states(db: Session) -> list[ResourceState]:
    return db.query(ResourceState).order_by(ResourceState.address).all()


def save_state(db: Session, address: str, resource_type: str, resource_id: str, attributes: dict) -> ResourceState:
    """Insert or overwrite the state for address. Caller commits."""
    row = get_state(db, address)
    if row is None:
        row = ResourceState(address=address, resource_type=resource_type)
        db.add(row)
    row.resource_id = resource_id
    row.set_attributes(attributes)
    return row


def remove_state(db: Session, address: str) -> bool:
    """Delete stored state; returns False if there was none. Caller commits."""
    row = get_state(db, address)
    if row is None:
        return False
    db.delete(row)
    logger.debug("Removed state for %s", address)
    return True
