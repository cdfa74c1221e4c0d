import logging

from django.db import transaction, IntegrityError
from django.db.models import F, Case, When, Value
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from events.models import Event
from events.services import is_deadline_passed, is_slots_full
from utils.exceptions import first_message
from .models import Registration, TeamMember
from .serializers import TeamMemberSerializer

logger = logging.getLogger(__name__)


def check_registration_open(user, event, now=None):
    if event.approval_status != Event.APPROVED:
        raise ValidationError("This event is not open for registration.")
    if is_deadline_passed(event, now or timezone.now()):
        raise ValidationError("Registration deadline has passed.")
    if is_slots_full(event):
        raise ValidationError("All slots for this event are filled.")
    if Registration.objects.filter(user=user, event=event).exists():
        raise ValidationError("You are already registered for this event.")


def validate_team(event, members):
    """
    Validate a team against the event's size limits and the member rules.

    Returns the cleaned member dicts. The first problem found is raised as a
    single message; for a member field it reads ``"<field>: <message>"``.
    """
    size = len(members)
    if size < event.team_size_min:
        raise ValidationError(f"Minimum team size is {event.team_size_min} members")
    if size > event.team_size_max:
        raise ValidationError(f"Maximum team size is {event.team_size_max} members")

    cleaned = []
    for member in members:
        serializer = TeamMemberSerializer(data=member)
        if not serializer.is_valid():
            raise ValidationError(first_message(serializer.errors))
        cleaned.append(serializer.validated_data)

    leaders = sum(1 for member in cleaned if member.get('is_leader'))
    if leaders != 1:
        raise ValidationError("Exactly one team leader is required")
    return cleaned


def register_team(user, event, members, team_name=None):
    check_registration_open(user, event)
    cleaned = validate_team(event, members)

    payment_status = Registration.PAYMENT_PENDING if event.registration_fee > 0 else Registration.PAYMENT_COMPLETED
    try:
        with transaction.atomic():
            registration = Registration.objects.create(
                user=user,
                event=event,
                team_name=(team_name or '').strip() or None,
                status=Registration.REGISTERED,
                payment_status=payment_status,
            )
            TeamMember.objects.bulk_create([
                TeamMember(registration=registration, **member) for member in cleaned
            ])
            # the slot is only taken if one is still free when the row is updated
            claimed = Event.objects.filter(pk=event.pk, registered_count__lt=F('total_slots')).update(
                registered_count=F('registered_count') + 1
            )
            if not claimed:
                raise ValidationError("All slots for this event are filled.")
    except IntegrityError:
        raise ValidationError("You are already registered for this event.")

    logger.info(f"User {user.id} registered for event {event.id} with {len(cleaned)} member(s)")
    return registration


def cancel_registration(user, registration):
    if registration.user_id != user.id:
        raise ValidationError("You can only cancel your own registration.")
    if hasattr(registration, 'submission'):
        raise ValidationError("You cannot cancel a registration that already has a submission.")

    event_id = registration.event_id
    with transaction.atomic():
        registration.delete()
        Event.objects.filter(pk=event_id).update(
            registered_count=Case(
                When(registered_count__gt=0, then=F('registered_count') - 1),
                default=Value(0),
            )
        )
    logger.info(f"User {user.id} cancelled registration for event {event_id}")
