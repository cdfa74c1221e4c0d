import logging

from django.conf import settings
from django.core.mail import send_mail
from django.db.models import F
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from accounts.models import UserRole
from accounts.permissions import has_role
from .models import Event, RecentlyViewed

logger = logging.getLogger(__name__)


def is_deadline_passed(event, now=None):
    now = now or timezone.now()
    return event.registration_deadline < now


def is_slots_full(event):
    return event.registered_count >= event.total_slots


def is_team_full(event, size):
    return size >= event.team_size_max


def can_manage_event(user, event):
    if not user or not user.is_authenticated:
        return False
    if has_role(user, UserRole.ADMIN):
        return True
    profile = event.organizer_profile
    return profile is not None and profile.user_id == user.id


def can_view_event(user, event):
    """Approved events are public; others only reach their organizer and admins."""
    if event.approval_status == Event.APPROVED:
        return True
    return can_manage_event(user, event)


def record_view(user, event):
    Event.objects.filter(pk=event.pk).update(impressions=F('impressions') + 1)
    if user and user.is_authenticated:
        RecentlyViewed.objects.update_or_create(
            user=user, event=event, defaults={'viewed_at': timezone.now()}
        )
    event.refresh_from_db(fields=['impressions'])


def _notify_organizer(event, subject, message):
    profile = event.organizer_profile
    if profile is None:
        return
    sent = send_mail(
        subject=subject,
        message=message,
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[profile.contact_email or profile.user.email],
        fail_silently=True,
    )
    if not sent:
        logger.warning(f"Could not email review decision for event {event.id} to its organizer")


def _ensure_pending(event):
    if event.approval_status != Event.PENDING:
        raise ValidationError("This event has already been reviewed.")


def approve_event(event):
    _ensure_pending(event)
    event.approval_status = Event.APPROVED
    event.rejection_reason = None
    event.save(update_fields=['approval_status', 'rejection_reason', 'updated_at'])
    logger.info(f"Event {event.id} approved")
    _notify_organizer(
        event,
        'Event Approved',
        f'Your event "{event.title}" has been approved and is now visible to students.',
    )
    return event


def reject_event(event, reason):
    reason = (reason or '').strip()
    if not reason:
        raise ValidationError("Please provide a reason for rejection")
    _ensure_pending(event)
    event.approval_status = Event.REJECTED
    event.rejection_reason = reason
    event.save(update_fields=['approval_status', 'rejection_reason', 'updated_at'])
    logger.info(f"Event {event.id} rejected")
    _notify_organizer(
        event,
        'Event Rejected',
        f'Your event "{event.title}" was not approved.\n\nReason: {reason}',
    )
    return event
