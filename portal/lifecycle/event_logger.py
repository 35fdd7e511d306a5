"""Audit trail for lifecycle transitions."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.db.models import AuditEvent
from portal.lifecycle.state_machine import StateTransition

logger = logging.getLogger(__name__)


class EventLogger:
    """
    Records every state change as an AuditEvent.

    Events are added to the caller's session and committed together with the
    transition they describe.
    """

    @staticmethod
    def log_state_transition(
        db: AsyncSession,
        transition: StateTransition,
        event_type: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> AuditEvent:
        """
        Stage an audit event for a transition.

        Args:
            db: Database session (not committed here)
            transition: Validated transition
            event_type: Event name, e.g. "content.approved"
            payload: Extra JSON-serializable details
        """
        event = AuditEvent(
            event_type=event_type,
            entity_type=transition.entity_type,
            entity_id=transition.entity_id,
            actor_id=transition.actor_id,
            from_status=transition.from_state.value,
            to_status=transition.to_state.value,
            payload={**transition.to_dict(), **(payload or {})},
        )
        db.add(event)
        logger.info(
            "%s %s#%s %s -> %s by user %s",
            event_type,
            transition.entity_type,
            transition.entity_id,
            transition.from_state.value,
            transition.to_state.value,
            transition.actor_id,
        )
        return event

    @staticmethod
    def log_creation(
        db: AsyncSession,
        entity_type: str,
        entity_id: int,
        status: str,
        actor_id: Optional[int],
    ) -> AuditEvent:
        """Stage an audit event for a new entity entering its initial state."""
        event = AuditEvent(
            event_type=f"{entity_type}.submitted",
            entity_type=entity_type,
            entity_id=entity_id,
            actor_id=actor_id,
            from_status=None,
            to_status=status,
            payload={},
        )
        db.add(event)
        logger.info("%s#%s submitted by user %s", entity_type, entity_id, actor_id)
        return event

    @staticmethod
    def log_deletion(
        db: AsyncSession,
        entity_type: str,
        entity_id: int,
        status: str,
        actor_id: Optional[int],
    ) -> AuditEvent:
        """Stage an audit event for a hard delete; the entity has no state afterwards."""
        event = AuditEvent(
            event_type=f"{entity_type}.deleted",
            entity_type=entity_type,
            entity_id=entity_id,
            actor_id=actor_id,
            from_status=status,
            to_status=None,
            payload={},
        )
        db.add(event)
        logger.info("%s#%s deleted by user %s", entity_type, entity_id, actor_id)
        return event

    @staticmethod
    async def get_history(db: AsyncSession, entity_type: str, entity_id: int) -> List[AuditEvent]:
        """Get all events for an entity, oldest first."""
        result = await db.execute(
            select(AuditEvent)
            .where(AuditEvent.entity_type == entity_type, AuditEvent.entity_id == entity_id)
            .order_by(AuditEvent.id)
        )
        return list(result.scalars().all())
