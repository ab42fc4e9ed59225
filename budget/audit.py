import logging

from .models import AuditLog

logger = logging.getLogger(__name__)


def record(user, action, entity, entity_id="", **details):
    """Append an audit entry for a change made to ``user``'s budget."""
    log = AuditLog.objects.create(
        user=user,
        action=action,
        entity=entity,
        entity_id=str(entity_id),
        details=details,
    )
    logger.debug(f"Audit: {user.pk} {action} {entity} {entity_id}")
    return log
