import logging
import re

from django.db import transaction
from rest_framework.exceptions import ValidationError, PermissionDenied

from events.models import Event
from utils.storage import submission_file_key, upload_file, delete_file, key_from_url
from .models import Submission

logger = logging.getLogger(__name__)

NOT_SUBMITTED = 'not_submitted'
SUBMITTED = 'submitted'
UNDER_REVIEW = 'under_review'
SELECTED = 'selected'
NOT_SELECTED = 'not_selected'

LINK_TYPES = (Event.SUBMISSION_GITHUB, Event.SUBMISSION_BOTH)
FILE_TYPES = (Event.SUBMISSION_ZIP, Event.SUBMISSION_BOTH)


def can_edit_submission(submission):
    return submission is None or submission.rating is None


def submission_status(submission):
    if submission is None:
        return NOT_SUBMITTED
    if submission.result_published:
        return SELECTED if submission.is_selected_for_next_round else NOT_SELECTED
    if submission.rating is not None:
        return UNDER_REVIEW
    return SUBMITTED


def team_display_name(registration):
    if registration.team_name:
        return registration.team_name
    leader = registration.leader
    if leader is not None and leader.name:
        return leader.name
    return "Unknown Team"


def sort_by_rating(rows, descending=True):
    """Sort rows by ``rating``; unrated rows count as 0 and ties keep their order."""
    def rating_of(row):
        rating = row.get('rating') if isinstance(row, dict) else row.rating
        return rating if rating is not None else 0
    return sorted(rows, key=rating_of, reverse=descending)


def parse_rating(value):
    if isinstance(value, bool):
        raise ValidationError("Rating must be between 0 and 100")
    if isinstance(value, int):
        rating = value
    else:
        text = str(value if value is not None else '').strip()
        if not re.fullmatch(r'-?[0-9]+', text):
            raise ValidationError("Rating must be between 0 and 100")
        rating = int(text)
    if rating < 0 or rating > 100:
        raise ValidationError("Rating must be between 0 and 100")
    return rating


def submit_project(user, registration, github_link=None, upload=None):
    """
    Create or update the submission for a registration.

    The archive goes to object storage before the row is written. If the
    write fails, the stored object is deleted again and the error is raised.
    Once a new archive is saved, the one it replaced is removed.
    """
    event = registration.event
    submission = Submission.objects.filter(registration=registration).first()

    if event.submission_type == Event.SUBMISSION_NONE:
        raise ValidationError("This event does not accept submissions.")
    if not can_edit_submission(submission):
        raise PermissionDenied("This submission has already been evaluated and can no longer be edited.")

    github_link = (github_link or '').strip() or None
    if event.submission_type in LINK_TYPES and not github_link:
        raise ValidationError("Please provide a GitHub link")
    has_file = submission is not None and bool(submission.file_url)
    if event.submission_type in FILE_TYPES and upload is None and not has_file:
        raise ValidationError("Please upload a file")

    key = None
    previous_url = submission.file_url if submission else None
    file_url = previous_url
    if upload is not None and event.submission_type in FILE_TYPES:
        key = submission_file_key(user.id, event.id, upload.name)
        file_url = upload_file(upload, key)

    try:
        with transaction.atomic():
            if submission is None:
                submission = Submission.objects.create(
                    registration=registration,
                    event=event,
                    github_link=github_link,
                    file_url=file_url,
                )
            else:
                submission.github_link = github_link
                submission.file_url = file_url
                submission.save(update_fields=['github_link', 'file_url', 'updated_at'])
    except Exception:
        if key is not None:
            logger.error(f"Saving submission for registration {registration.id} failed, removing {key}")
            delete_file(key)
        raise

    if key is not None and previous_url and previous_url != file_url:
        old_key = key_from_url(previous_url)
        if old_key:
            delete_file(old_key)

    logger.info(f"Submission {submission.id} saved for event {event.id}")
    return submission


def submission_rows(event, descending=True):
    submissions = (
        Submission.objects.filter(event=event)
        .select_related('registration__user')
        .prefetch_related('registration__members')
    )
    return sort_by_rating(list(submissions), descending=descending)


def evaluate_submission(submission, rating, is_selected=False, notes=None):
    if submission.result_published:
        raise ValidationError("Results have already been published for this event.")
    submission.rating = parse_rating(rating)
    submission.is_selected_for_next_round = bool(is_selected)
    submission.evaluation_notes = (notes or '').strip() or None
    submission.save(update_fields=['rating', 'is_selected_for_next_round', 'evaluation_notes', 'updated_at'])
    logger.info(f"Submission {submission.id} rated {submission.rating}")
    return submission


def publish_results(event):
    count = Submission.objects.filter(event=event).update(result_published=True)
    logger.info(f"Published {count} result(s) for event {event.id}")
    return count
