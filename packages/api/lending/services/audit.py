# This project was developed with assistance from AI tools.
"""Audit event service.

Writes append-only audit trail entries.  Rows are inserted and read, never
updated or deleted; a repeated action is a new row.
"""

import logging

from db import AuditEvent
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def write_audit_event(
    session: AsyncSession,
    *,
    event_type: str,
    user_id: str | None = None,
    user_role: str | None = None,
    entity_type: str | None = None,
    entity_id: str | int | None = None,
    event_data: dict | None = None,
) -> AuditEvent:
    """Append a single audit event.

    Args:
        session: Database session.
        event_type: Action kind (e.g. 'FRAUD_REVIEW_CONFIRM').
        user_id: User who performed the action.
        user_role: Role at the time of the action.
        entity_type: Kind of record acted on (e.g. 'FraudCheck').
        entity_id: Identifier of the record acted on.
        event_data: Arbitrary JSON-serializable payload.

    Returns:
        The created AuditEvent row (flushed, so ``id`` is populated).
    """
    audit = AuditEvent(
        event_type=event_type,
        user_id=user_id,
        user_role=user_role,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        event_data=event_data,
    )
    session.add(audit)
    await session.flush()
    logger.debug("Audit event %s on %s %s by %s", event_type, entity_type, entity_id, user_id)
    return audit


async def get_events_for_entity(
    session: AsyncSession,
    entity_type: str,
    entity_id: str | int,
) -> list[AuditEvent]:
    """Return all audit events recorded against one entity, oldest first."""
    stmt = (
        select(AuditEvent)
        .where(
            AuditEvent.entity_type == entity_type,
            AuditEvent.entity_id == str(entity_id),
        )
        .order_by(AuditEvent.timestamp.asc(), AuditEvent.id.asc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())
