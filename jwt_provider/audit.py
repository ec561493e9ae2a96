"""
Audit logging for resource lifecycle events. Addresses and outcomes only; no secrets or tokens.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from jwt_provider.config import AUDIT_MAX_LIMIT
from jwt_provider.database import get_db
from jwt_provider.models import AuditLog

EVENT_RESOURCE_CREATED = "resource_created"
EVENT_RESOURCE_REPLACED = "resource_replaced"
EVENT_RESOURCE_DESTROYED = "resource_destroyed"
EVENT_APPLY_FAILED = "apply_failed"

OUTCOME_SUCCESS = "success"
OUTCOME_FAIL = "fail"


def log_audit(
    db: Session,
    event_type: str,
    *,
    address: str | None = None,
    resource_type: str | None = None,
    outcome: str = OUTCOME_SUCCESS,
    detail: str | None = None,
) -> None:
    """Append one audit record and commit. Never pass token or secret values."""
    db.add(
        AuditLog(
            event_type=event_type,
            address=address,
            resource_type=resource_type,
            outcome=outcome,
            detail=detail,
        )
    )
    db.commit()


router = APIRouter(tags=["audit"])


def _query_audit_logs(
    db: Session,
    *,
    limit: int = 100,
    event_type: str | None = None,
    outcome: str | None = None,
    address: str | None = None,
):
    """Query audit logs with optional filters. Most recent first."""
    q = db.query(AuditLog).order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
    if event_type:
        q = q.filter(AuditLog.event_type == event_type)
    if outcome:
        q = q.filter(AuditLog.outcome == outcome)
    if address:
        q = q.filter(AuditLog.address == address)
    rows = q.limit(min(max(1, limit), AUDIT_MAX_LIMIT)).all()
    return [
        {
            "created_at": r.created_at.isoformat() if r.created_at else None,
            "event_type": r.event_type,
            "address": r.address,
            "resource_type": r.resource_type,
            "outcome": r.outcome,
            "detail": r.detail,
        }
        for r in rows
    ]


@router.get("/audit")
def list_audit_logs(
    limit: int = 100,
    event_type: str | None = None,
    outcome: str | None = None,
    address: str | None = None,
    db: Session = Depends(get_db),
):
    """List recent lifecycle events. No tokens or secrets. Most recent first."""
    return _query_audit_logs(db, limit=limit, event_type=event_type, outcome=outcome, address=address)
