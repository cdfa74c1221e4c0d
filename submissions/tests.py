from types import SimpleNamespace
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, SimpleTestCase
from django.utils import timezone
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from accounts.models import User, UserRole, Organizer
from events.models import Event
from registrations.models import Registration, TeamMember
from submissions.models import Submission
from submissions.services import (
    can_edit_submission, submission_status, team_display_name, sort_by_rating, parse_rating
)
from utils.storage import submission_file_key, key_from_url

STORAGE_URL = 'https://res.cloudinary.com/demo/raw/upload/submissions/archive.zip'


class SubmissionRulesTest(SimpleTestCase):

    def test_status_labels(self):
        self.assertEqual(submission_status(None), 'not_submitted')
        sub = SimpleNamespace(rating=None, result_published=False, is_selected_for_next_round=False)
        self.assertEqual(submission_status(sub), 'submitted')
        sub.rating = 70
        self.assertEqual(submission_status(sub), 'under_review')
        sub.result_published = True
        self.assertEqual(submission_status(sub), 'not_selected')
        sub.is_selected_for_next_round = True
        self.assertEqual(submission_status(sub), 'selected')

    def test_edit_lock_follows_rating(self):
        self.assertTrue(can_edit_submission(None))
        self.assertTrue(can_edit_submission(SimpleNamespace(rating=None)))
        self.assertFalse(can_edit_submission(SimpleNamespace(rating=0)))

    def test_sort_treats_missing_rating_as_zero_and_is_stable(self):
        rows = [
            {'id': 1, 'rating': None},
            {'id': 2, 'rating': 40},
            {'id': 3, 'rating': 0},
            {'id': 4, 'rating': 90},
        ]
        self.assertEqual([r['id'] for r in sort_by_rating(rows)], [4, 2, 1, 3])
        self.assertEqual([r['id'] for r in sort_by_rating(rows, descending=False)], [1, 3, 2, 4])

    def test_parse_rating(self):
        self.assertEqual(parse_rating('0'), 0)
        self.assertEqual(parse_rating(100), 100)
        self.assertEqual(parse_rating(' 55 '), 55)
        for bad in ['101', '-1', '50.5', 'abc', '\u00b2', '', None, True]:
            with self.assertRaisesMessage(ValidationError, "Rating must be between 0 and 100"):
                parse_rating(bad)

    def test_storage_key_layout(self):
        key = submission_file_key(12, 7, 'My Project.ZIP', timestamp=1718000000000)
        self.assertEqual(key, 'submissions/12/7/1718000000000.zip')

    def test_storage_key_from_url(self):
        self.assertEqual(
            key_from_url('https://res.cloudinary.com/demo/raw/upload/v1718/submissions/12/7/1718.zip'),
            'submissions/12/7/1718.zip'
        )
        self.assertEqual(key_from_url(STORAGE_URL), 'submissions/archive.zip')
        self.assertIsNone(key_from_url('https://example.com/file.zip'))


class SubmissionTestMixin:

    def create_fixtures(self, submission_type=Event.SUBMISSION_BOTH):
        now = timezone.now()
        self.organizer = User.objects.create_user(email='org@example.com', password='Password1')
        UserRole.objects.create(user=self.organizer, role=UserRole.ORGANIZER)
        profile = Organizer.objects.create(user=self.organizer, organization_name='Code Club', contact_email='org@example.com')
        self.student = User.objects.create_user(email='student@example.com', password='Password1')
        UserRole.objects.create(user=self.student, role=UserRole.STUDENT)
        self.event = Event.objects.create(
            title='Ship It',
            organizer='Code Club',
            organizer_profile=profile,
            location='Online',
            event_date=now + timezone.timedelta(days=3),
            registration_deadline=now + timezone.timedelta(days=1),
            description='Build and ship.',
            submission_type=submission_type,
            approval_status=Event.APPROVED,
        )
        self.registration = Registration.objects.create(user=self.student, event=self.event)
        TeamMember.objects.create(
            registration=self.registration, name='Asha', email='asha@example.com',
            phone='9876543210', college_name='Anna University', is_leader=True
        )
        self.url = f'/api/v1/submissions/events/{self.event.id}/'
        self.client = APIClient()


class SubmitProjectTest(SubmissionTestMixin, TestCase):

    def setUp(self):
        self.create_fixtures()
        self.client.force_authenticate(user=self.student)

    def archive(self):
        return SimpleUploadedFile('project.zip', b'PK\x03\x04 fake archive', content_type='application/zip')

    def test_requires_registration(self):
        other = User.objects.create_user(email='other@example.com', password='Password1')
        UserRole.objects.create(user=other, role=UserRole.STUDENT)
        self.client.force_authenticate(user=other)
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data['error'], 'You are not registered for this event.')

    def test_link_and_file_are_required(self):
        resp = self.client.post(self.url, {'file': self.archive()}, format='multipart')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Please provide a GitHub link')

        resp = self.client.post(self.url, {'github_link': 'https://github.com/asha/ship-it'}, format='multipart')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Please upload a file')

    @mock.patch('utils.storage.cloudinary.uploader.upload')
    def test_submit_then_update(self, mock_upload):
        mock_upload.return_value = {'secure_url': STORAGE_URL}

        resp = self.client.post(self.url, {
            'github_link': 'https://github.com/asha/ship-it',
            'file': self.archive(),
        }, format='multipart')
        self.assertEqual(resp.status_code, 201)
        submission = Submission.objects.get(registration=self.registration)
        self.assertEqual(submission.file_url, STORAGE_URL)
        public_id = mock_upload.call_args.kwargs['public_id']
        self.assertTrue(public_id.startswith(f'submissions/{self.student.id}/{self.event.id}/'))
        self.assertTrue(public_id.endswith('.zip'))

        # the stored file is kept when only the link changes
        resp = self.client.post(self.url, {'github_link': 'https://github.com/asha/ship-it-v2'}, format='multipart')
        self.assertEqual(resp.status_code, 200)
        submission.refresh_from_db()
        self.assertEqual(submission.github_link, 'https://github.com/asha/ship-it-v2')
        self.assertEqual(submission.file_url, STORAGE_URL)
        self.assertEqual(Submission.objects.count(), 1)

        resp = self.client.get(self.url)
        self.assertEqual(resp.data['status'], 'submitted')
        self.assertTrue(resp.data['can_edit'])

    def test_rated_submission_is_locked(self):
        Submission.objects.create(
            registration=self.registration, event=self.event,
            github_link='https://github.com/asha/ship-it', file_url=STORAGE_URL, rating=64
        )
        resp = self.client.post(self.url, {'github_link': 'https://github.com/asha/other'}, format='multipart')
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.data['error'], 'This submission has already been evaluated and can no longer be edited.')

        resp = self.client.get(self.url)
        self.assertEqual(resp.data['status'], 'under_review')
        self.assertFalse(resp.data['can_edit'])
        self.assertIsNone(resp.data['submission']['rating'])

    @mock.patch('utils.storage.cloudinary.uploader.destroy')
    @mock.patch('utils.storage.cloudinary.uploader.upload')
    def test_failed_write_removes_uploaded_file(self, mock_upload, mock_destroy):
        mock_upload.return_value = {'secure_url': STORAGE_URL}
        mock_destroy.return_value = {'result': 'ok'}

        with mock.patch('submissions.services.Submission.objects.create', side_effect=RuntimeError('db down')):
            with self.assertRaises(RuntimeError):
                self.client.post(self.url, {
                    'github_link': 'https://github.com/asha/ship-it',
                    'file': self.archive(),
                }, format='multipart')

        key = mock_upload.call_args.kwargs['public_id']
        mock_destroy.assert_called_once_with(key, resource_type='raw')
        self.assertFalse(Submission.objects.exists())

    @mock.patch('utils.storage.cloudinary.uploader.destroy')
    @mock.patch('utils.storage.cloudinary.uploader.upload')
    def test_new_archive_removes_replaced_one(self, mock_upload, mock_destroy):
        old_url = f'https://res.cloudinary.com/demo/raw/upload/v1/submissions/{self.student.id}/{self.event.id}/1.zip'
        Submission.objects.create(
            registration=self.registration, event=self.event,
            github_link='https://github.com/asha/ship-it', file_url=old_url
        )
        mock_upload.return_value = {'secure_url': STORAGE_URL}
        mock_destroy.return_value = {'result': 'ok'}

        resp = self.client.post(self.url, {
            'github_link': 'https://github.com/asha/ship-it-v2',
            'file': self.archive(),
        }, format='multipart')
        self.assertEqual(resp.status_code, 200)
        mock_destroy.assert_called_once_with(
            f'submissions/{self.student.id}/{self.event.id}/1.zip', resource_type='raw'
        )
        submission = Submission.objects.get(registration=self.registration)
        self.assertEqual(submission.file_url, STORAGE_URL)


class NoSubmissionEventTest(SubmissionTestMixin, TestCase):

    def setUp(self):
        self.create_fixtures(submission_type=Event.SUBMISSION_NONE)
        self.client.force_authenticate(user=self.student)

    def test_event_without_submissions_rejects_posts(self):
        resp = self.client.post(self.url, {'github_link': 'https://github.com/asha/ship-it'}, format='multipart')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'This event does not accept submissions.')


class LinkOnlyEventTest(SubmissionTestMixin, TestCase):

    def setUp(self):
        self.create_fixtures(submission_type=Event.SUBMISSION_GITHUB)
        self.client.force_authenticate(user=self.student)

    def test_link_is_required_and_no_file_needed(self):
        resp = self.client.post(self.url, {'github_link': '   '}, format='multipart')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Please provide a GitHub link')
        self.assertFalse(Submission.objects.exists())

        resp = self.client.post(self.url, {'github_link': 'https://github.com/asha/ship-it'}, format='multipart')
        self.assertEqual(resp.status_code, 201)
        submission = Submission.objects.get(registration=self.registration)
        self.assertEqual(submission.github_link, 'https://github.com/asha/ship-it')
        self.assertIsNone(submission.file_url)


class EvaluationTest(SubmissionTestMixin, TestCase):

    def setUp(self):
        self.create_fixtures(submission_type=Event.SUBMISSION_GITHUB)
        self.first = Submission.objects.create(
            registration=self.registration, event=self.event, github_link='https://github.com/asha/one'
        )
        second_user = User.objects.create_user(email='second@example.com', password='Password1')
        second_reg = Registration.objects.create(user=second_user, event=self.event, team_name='Night Owls')
        self.second = Submission.objects.create(
            registration=second_reg, event=self.event, github_link='https://github.com/owls/two', rating=75
        )
        third_reg = Registration.objects.create(
            user=User.objects.create_user(email='third@example.com', password='Password1'), event=self.event
        )
        self.third = Submission.objects.create(registration=third_reg, event=self.event, rating=40)
        self.client.force_authenticate(user=self.organizer)

    def test_review_list_names_and_order(self):
        resp = self.client.get(f'/api/v1/submissions/events/{self.event.id}/review/')
        self.assertEqual(resp.status_code, 200)
        rows = resp.data['submissions']
        self.assertEqual([row['id'] for row in rows], [self.second.id, self.third.id, self.first.id])
        self.assertEqual(
            [row['display_name'] for row in rows],
            ['Night Owls', 'Unknown Team', 'Asha']
        )

        resp = self.client.get(f'/api/v1/submissions/events/{self.event.id}/review/', {'order': 'asc'})
        self.assertEqual([row['id'] for row in resp.data['submissions']], [self.first.id, self.third.id, self.second.id])

    def test_display_name_fallbacks(self):
        self.assertEqual(team_display_name(self.second.registration), 'Night Owls')
        self.assertEqual(team_display_name(self.first.registration), 'Asha')
        self.assertEqual(team_display_name(self.third.registration), 'Unknown Team')

    def test_evaluate_validates_rating(self):
        url = f'/api/v1/submissions/{self.first.id}/evaluate/'
        resp = self.client.post(url, {'rating': '101'}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Rating must be between 0 and 100')

        resp = self.client.post(url, {
            'rating': 88,
            'is_selected_for_next_round': True,
            'evaluation_notes': '   ',
        }, format='json')
        self.assertEqual(resp.status_code, 200)
        self.first.refresh_from_db()
        self.assertEqual(self.first.rating, 88)
        self.assertTrue(self.first.is_selected_for_next_round)
        self.assertIsNone(self.first.evaluation_notes)

    def test_publish_covers_unrated_submissions_and_locks_evaluation(self):
        url = f'/api/v1/submissions/events/{self.event.id}/publish/'
        resp = self.client.post(url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['published'], 3)
        self.assertEqual(Submission.objects.filter(result_published=True).count(), 3)

        # publishing again is harmless
        self.assertEqual(self.client.post(url).data['published'], 3)

        resp = self.client.post(f'/api/v1/submissions/{self.first.id}/evaluate/', {'rating': 50}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Results have already been published for this event.')

        self.client.force_authenticate(user=self.student)
        resp = self.client.get(self.url)
        self.assertEqual(resp.data['status'], 'not_selected')
        self.assertIsNone(resp.data['submission']['rating'])

    def test_other_organizers_cannot_review(self):
        stranger = User.objects.create_user(email='stranger@example.com', password='Password1')
        UserRole.objects.create(user=stranger, role=UserRole.ORGANIZER)
        self.client.force_authenticate(user=stranger)
        resp = self.client.get(f'/api/v1/submissions/events/{self.event.id}/review/')
        self.assertEqual(resp.status_code, 403)
        resp = self.client.post(f'/api/v1/submissions/{self.first.id}/evaluate/', {'rating': 10}, format='json')
        self.assertEqual(resp.status_code, 403)
