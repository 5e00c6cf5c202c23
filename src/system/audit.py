import logging

from django.db import DatabaseError, transaction

from .models import AuditLog

logger = logging.getLogger(__name__)


def client_ip(request):
    """First address from X-Forwarded-For, else REMOTE_ADDR."""
    xff = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if xff:
        return xff.split(",")[0].strip() or None
    return request.META.get("REMOTE_ADDR") or None


def record_audit(action, *, user=None, entity_type='', entity_id=None,
                 old_value=None, new_value=None, request=None):
    """
    Write one audit row for an admin action.

    Best-effort: a storage failure is logged and None is returned, the
    surrounding operation goes on. The insert runs in its own savepoint so
    a failure does not break an enclosing transaction.
    """
    if user is not None and not getattr(user, "is_authenticated", False):
        user = None
    try:
        with transaction.atomic():
            return AuditLog.objects.create(
                user=user,
                action=action,
                entity_type=entity_type or '',
                entity_id=entity_id,
                old_value=old_value,
                new_value=new_value,
                ip_address=client_ip(request) if request is not None else None,
                user_agent=request.META.get("HTTP_USER_AGENT", "") if request is not None else '',
            )
    except DatabaseError:
        logger.exception("audit log write failed: action=%s entity=%s:%s", action, entity_type, entity_id)
        return None
