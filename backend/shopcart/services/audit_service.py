"""Audit logging for state-changing operations.

Every lifecycle mutation produces one structured record on the ``audit``
logger carrying the operation, resource, resource id, actor and outcome as
``extra`` fields; the JSON formatter writes them out as top-level keys.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from shopcart.core.errors import AppError
from shopcart.core.logging_config import AUDIT_LOGGER

logger = logging.getLogger(AUDIT_LOGGER)

SUCCESS = "success"
REJECTED = "rejected"
FAILED = "failed"


def log_action(
    operation: str,
    resource: str,
    resource_id: Optional[Any] = None,
    outcome: str = SUCCESS,
    actor: Optional[str] = None,
    reason: Optional[str] = None,
) -> None:
    """Write one audit record.

    Args:
        operation: create, update, delete, restore, status or password
        resource: admin, category or product
        resource_id: id of the affected record, when known
        outcome: success, rejected (client error) or failed (server error)
        actor: who performed the action, when an auth layer supplies it
        reason: short failure description; never contains submitted values
    """
    level = logging.INFO if outcome == SUCCESS else logging.WARNING
    if outcome == FAILED:
        level = logging.ERROR
    logger.log(
        level,
        "%s %s %s",
        operation,
        resource,
        outcome,
        extra={
            "operation": operation,
            "resource": resource,
            "resource_id": resource_id,
            "actor": actor,
            "outcome": outcome,
            "reason": reason,
        },
    )


class AuditRecord:
    """Mutable holder so the audited block can report the id it produced."""

    def __init__(self, resource_id: Optional[Any] = None):
        self.resource_id = resource_id


@contextmanager
def audited(
    operation: str,
    resource: str,
    resource_id: Optional[Any] = None,
    actor: Optional[str] = None,
) -> Iterator[AuditRecord]:
    """Log the outcome of the enclosed mutation and re-raise any error."""
    record = AuditRecord(resource_id)
    try:
        yield record
    except AppError as exc:
        log_action(operation, resource, record.resource_id, REJECTED, actor, type(exc).__name__)
        raise
    except Exception as exc:
        log_action(operation, resource, record.resource_id, FAILED, actor, type(exc).__name__)
        raise
    log_action(operation, resource, record.resource_id, SUCCESS, actor)
