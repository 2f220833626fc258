import logging
from functools import partial

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction

from core.json_payloads import NOTIFICATION_SCHEMA
from core.validators import validate_json_payload
from .models import Notification

logger = logging.getLogger(__name__)


def notify(user, notification_type, payload, *, dedupe_key="", email=True):
    """
    Store an in-app notification for ``user`` and queue the e-mail copy.

    Returns the Notification, or None when ``dedupe_key`` was already used
    for this user.
    """
    validate_json_payload(NOTIFICATION_SCHEMA, payload, path="payload")
    if dedupe_key and Notification.objects.filter(user=user, dedupe_key=dedupe_key).exists():
        logger.debug("notification %s for user %s already sent", dedupe_key, user.pk)
        return None

    obj = Notification.objects.create(
        user=user,
        notification_type=notification_type,
        payload=payload,
        dedupe_key=dedupe_key,
    )
    logger.debug("notification %s (%s) created for user %s", obj.pk, notification_type, user.pk)
    if email and user.email:
        # mail goes out only once the surrounding transaction is durable
        transaction.on_commit(partial(send_notification_email, obj.pk))
    return obj


def notify_many(users, notification_type, payload, **kwargs):
    return [n for n in (notify(u, notification_type, payload, **kwargs) for u in users) if n]


def send_notification_email(notification_id):
    obj = Notification.objects.select_related("user").filter(pk=notification_id).first()
    if obj is None:
        return False
    payload = obj.payload or {}
    lines = [payload.get("message") or payload.get("title", "")]
    link = payload.get("link")
    if link:
        lines.append(f"{settings.FRONTEND_URL.rstrip('/')}{link}")
    try:
        send_mail(
            subject=payload.get("title", "Notification"),
            message="\n\n".join(lines),
            from_email=None,  # DEFAULT_FROM_EMAIL
            recipient_list=[obj.user.email],
            fail_silently=False,
        )
    except Exception:
        # delivery is best effort; the in-app copy stays
        logger.exception("could not e-mail notification %s to %s", obj.pk, obj.user.email)
        return False
    return True
