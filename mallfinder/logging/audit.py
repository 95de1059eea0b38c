"""Structured audit logging for admin catalog changes.

Provides an audit trail of who changed which mall, store or promotion,
and of refused admin attempts.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from mallfinder.logging import get_logger

logger = get_logger(__name__)


class AuditEventType(str, Enum):
    """Types of auditable events."""

    MALL_CREATED = "mall_created"
    MALL_UPDATED = "mall_updated"
    MALL_DELETED = "mall_deleted"

    STORE_CREATED = "store_created"
    STORE_UPDATED = "store_updated"
    STORE_DELETED = "store_deleted"

    PROMOTION_CREATED = "promotion_created"
    PROMOTION_UPDATED = "promotion_updated"
    PROMOTION_DELETED = "promotion_deleted"

    PERMISSION_DENIED = "permission_denied"


class AuditLogger:
    """Centralized audit logging service."""

    @staticmethod
    def log_event(
        event_type: AuditEventType,
        actor_id: int,
        resource_type: str,
        resource_id: UUID | str,
        action: str,
        success: bool = True,
        metadata: Optional[dict[str, Any]] = None,
        error: Optional[str] = None,
    ) -> None:
        """
        Log an auditable event with structured context.

        Args:
            event_type: Type of audit event
            actor_id: Telegram user ID performing the action
            resource_type: mall, store or promotion
            resource_id: ID of the affected resource
            action: Human-readable action description
            success: Whether the action succeeded
            metadata: Additional context (names, coordinates, dates)
            error: Error message if action failed
        """
        audit_entry = {
            "event_type": event_type.value,
            "actor_id": actor_id,
            "resource_type": resource_type,
            "resource_id": str(resource_id),
            "action": action,
            "success": success,
            "timestamp": datetime.utcnow().isoformat(),
            "metadata": metadata or {},
        }

        if error:
            audit_entry["error"] = error

        logger.info("audit_event", **audit_entry)

    @staticmethod
    def log_catalog_change(
        event_type: AuditEventType,
        actor_id: int,
        resource_type: str,
        resource_id: UUID | str,
        name: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Log a successful create/update/delete of a catalog entry."""
        verb = event_type.value.rsplit("_", 1)[-1]
        AuditLogger.log_event(
            event_type=event_type,
            actor_id=actor_id,
            resource_type=resource_type,
            resource_id=resource_id,
            action=f"{verb.capitalize()} {resource_type}: {name}",
            metadata={"name": name, **(metadata or {})},
        )

    @staticmethod
    def log_permission_denied(actor_id: int, action: str) -> None:
        """Log a refused admin attempt."""
        AuditLogger.log_event(
            event_type=AuditEventType.PERMISSION_DENIED,
            actor_id=actor_id,
            resource_type="permission",
            resource_id=action,
            action=f"Denied: {action}",
            success=False,
        )
