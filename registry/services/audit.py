"""
Helpers for writing audit trail entries from request handlers.
"""

import logging

from accounts.utils import get_client_ip

from ..models import AuditLog

logger = logging.getLogger(__name__)

_TARGET_MODELS = {
    'CustomUser': AuditLog.TargetModel.USER,
}


def record_event(request=None, *, event_type, action, user=None, target=None,
                 target_model=None, target_id='', target_description='',
                 region='', **extra):
    """
    Write an audit entry for the current request.

    Args:
        request: DRF/Django request; supplies the actor, IP and user agent
        event_type: One of AuditLog.EventType
        action: Human-readable description
        user: Actor override, for unauthenticated flows such as login
        target: Model instance the event is about; fills target_model,
            target_id, target_description and region
        **extra: Any other AuditLog field (severity, status, changes, ...)

    Returns:
        The AuditLog entry, or None if it could not be written
    """
    if user is None and request is not None and getattr(request, 'user', None) is not None:
        if request.user.is_authenticated:
            user = request.user

    if target is not None:
        class_name = target.__class__.__name__
        target_model = _TARGET_MODELS.get(class_name, class_name)
        target_id = str(target.pk)
        target_description = str(target)[:255]
        region = region or getattr(target, 'region', '') or ''

    ip_address = None
    user_agent = ''
    if request is not None:
        ip_address = get_client_ip(request)
        user_agent = request.META.get('HTTP_USER_AGENT', '')[:255]

    entry = AuditLog.objects.log_event(
        event_type=event_type,
        action=action[:500],
        performed_by=user,
        user_role=getattr(user, 'role', '') or '',
        target_model=target_model or AuditLog.TargetModel.SYSTEM,
        target_id=target_id,
        target_description=target_description,
        region=region,
        ip_address=ip_address,
        user_agent=user_agent,
        **extra
    )
    if entry is not None:
        logger.debug(f"Audit {entry.event_id}: {event_type} by {user}")
    return entry
