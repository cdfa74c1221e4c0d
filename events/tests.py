from types import SimpleNamespace

from django.core import mail
from django.test import TestCase, SimpleTestCase
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User, UserRole, Organizer
from events.models import Event, Wishlist, RecentlyViewed
from events.services import is_deadline_passed, is_slots_full, is_team_full
from registrations.models import Registration
from submissions.models import Submission


def make_user(email, role=UserRole.STUDENT):
    user = User.objects.create_user(email=email, full_name=email.split('@')[0], password='Password1')
    UserRole.objects.create(user=user, role=role)
    return user


def make_event(**kwargs):
    now = timezone.now()
    fields = {
        'title': 'Code Sprint',
        'organizer': 'Code Club',
        'location': 'Online',
        'event_date': now + timezone.timedelta(days=10),
        'registration_deadline': now + timezone.timedelta(days=5),
        'team_size_min': 1,
        'team_size_max': 4,
        'total_slots': 50,
        'description': 'A weekend of building.',
        'approval_status': Event.APPROVED,
    }
    fields.update(kwargs)
    return Event.objects.create(**fields)


class DerivedStateTest(SimpleTestCase):

    def test_deadline_slots_and_team_size(self):
        now = timezone.now()
        event = SimpleNamespace(
            registration_deadline=now - timezone.timedelta(minutes=1),
            registered_count=10,
            total_slots=10,
            team_size_max=3,
        )
        self.assertTrue(is_deadline_passed(event, now))
        self.assertFalse(is_deadline_passed(event, now - timezone.timedelta(hours=1)))
        self.assertTrue(is_slots_full(event))
        event.registered_count = 9
        self.assertFalse(is_slots_full(event))
        self.assertFalse(is_team_full(event, 2))
        self.assertTrue(is_team_full(event, 3))


class EventCatalogTest(TestCase):

    def setUp(self):
        self.student = make_user('student@example.com')
        self.client = APIClient()
        self.hack = make_event(title='Hack Night', tags=['ai', 'web'], prize_money=5000)
        self.quiz = make_event(title='Quiz Bowl', event_type='Quiz', tags=['trivia'], prize_money=100,
                               event_date=timezone.now() + timezone.timedelta(days=2))
        self.pending = make_event(title='Secret Hack', approval_status=Event.PENDING)

    def test_list_shows_only_approved_events(self):
        resp = self.client.get('/api/v1/events/')
        self.assertEqual(resp.status_code, 200)
        titles = [event['title'] for event in resp.data]
        self.assertEqual(titles, ['Quiz Bowl', 'Hack Night'])

    def test_list_filters_and_ordering(self):
        resp = self.client.get('/api/v1/events/', {'q': 'hack'})
        self.assertEqual([e['title'] for e in resp.data], ['Hack Night'])

        resp = self.client.get('/api/v1/events/', {'tag': 'trivia'})
        self.assertEqual([e['title'] for e in resp.data], ['Quiz Bowl'])

        resp = self.client.get('/api/v1/events/', {'event_type': 'quiz'})
        self.assertEqual([e['title'] for e in resp.data], ['Quiz Bowl'])

        resp = self.client.get('/api/v1/events/', {'ordering': '-prize_money'})
        self.assertEqual([e['title'] for e in resp.data], ['Hack Night', 'Quiz Bowl'])

    def test_detail_counts_impressions_and_upserts_recently_viewed(self):
        self.client.force_authenticate(user=self.student)
        self.client.get(f'/api/v1/events/{self.hack.id}/')
        resp = self.client.get(f'/api/v1/events/{self.hack.id}/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['impressions'], 2)
        self.assertFalse(resp.data['deadline_passed'])
        self.assertFalse(resp.data['slots_full'])
        self.assertFalse(resp.data['is_registered'])
        self.assertEqual(RecentlyViewed.objects.filter(user=self.student, event=self.hack).count(), 1)

    def test_pending_event_hidden_from_students(self):
        self.client.force_authenticate(user=self.student)
        resp = self.client.get(f'/api/v1/events/{self.pending.id}/')
        self.assertEqual(resp.status_code, 404)

    def test_pending_event_visible_to_its_organizer(self):
        organizer = make_user('org@example.com', role=UserRole.ORGANIZER)
        profile = Organizer.objects.create(user=organizer, organization_name='Code Club', contact_email='org@example.com')
        self.pending.organizer_profile = profile
        self.pending.save()
        self.client.force_authenticate(user=organizer)
        resp = self.client.get(f'/api/v1/events/{self.pending.id}/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['approval_status'], Event.PENDING)

    def test_detail_shows_result_only_after_publish(self):
        registration = Registration.objects.create(user=self.student, event=self.hack)
        submission = Submission.objects.create(registration=registration, event=self.hack, rating=81)
        self.client.force_authenticate(user=self.student)

        resp = self.client.get(f'/api/v1/events/{self.hack.id}/')
        self.assertTrue(resp.data['is_registered'])
        self.assertIsNone(resp.data['submission_result'])

        submission.result_published = True
        submission.is_selected_for_next_round = True
        submission.save()
        resp = self.client.get(f'/api/v1/events/{self.hack.id}/')
        self.assertEqual(resp.data['submission_result'], {'rating': 81, 'is_selected_for_next_round': True})


class WishlistActivityTest(TestCase):

    def setUp(self):
        self.student = make_user('student@example.com')
        self.client = APIClient()
        self.client.force_authenticate(user=self.student)
        self.events = [make_event(title=f'Event {i}') for i in range(4)]

    def test_wishlist_add_is_idempotent_and_removable(self):
        event = self.events[0]
        resp = self.client.post(f'/api/v1/events/{event.id}/wishlist/')
        self.assertEqual(resp.status_code, 201)
        resp = self.client.post(f'/api/v1/events/{event.id}/wishlist/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(Wishlist.objects.filter(user=self.student).count(), 1)

        resp = self.client.get('/api/v1/events/wishlist/')
        self.assertEqual(len(resp.data), 1)

        resp = self.client.delete(f'/api/v1/events/{event.id}/wishlist/')
        self.assertEqual(resp.status_code, 204)
        resp = self.client.delete(f'/api/v1/events/{event.id}/wishlist/')
        self.assertEqual(resp.status_code, 404)

    def test_activity_returns_three_of_each(self):
        for event in self.events:
            self.client.get(f'/api/v1/events/{event.id}/')
            Wishlist.objects.create(user=self.student, event=event)
            Registration.objects.create(user=self.student, event=event)

        resp = self.client.get('/api/v1/events/activity/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data['recently_viewed']), 3)
        self.assertEqual(len(resp.data['wishlist']), 3)
        self.assertEqual(len(resp.data['registered']), 3)


class CreateEventTest(TestCase):

    def setUp(self):
        self.organizer = make_user('org@example.com', role=UserRole.ORGANIZER)
        self.client = APIClient()
        self.client.force_authenticate(user=self.organizer)
        now = timezone.now()
        self.payload = {
            'title': 'Build Fest',
            'organizer': 'Code Club',
            'location': 'Chennai',
            'event_date': (now + timezone.timedelta(days=20)).isoformat(),
            'registration_deadline': (now + timezone.timedelta(days=10)).isoformat(),
            'team_size_min': 2,
            'team_size_max': 4,
            'total_slots': 30,
            'description': 'Ship something in 48 hours.',
            'tags': ['web'],
            'custom_sections': [{'title': 'Judging', 'description': 'Panel of mentors'}, {'title': '', 'description': ''}],
        }

    def test_organizer_without_profile_cannot_create(self):
        resp = self.client.post('/api/v1/events/create/', self.payload, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Organizer profile not found')

    def test_create_event_is_pending_with_defaults(self):
        Organizer.objects.create(user=self.organizer, organization_name='Code Club', contact_email='org@example.com')
        resp = self.client.post('/api/v1/events/create/', self.payload, format='json')
        self.assertEqual(resp.status_code, 201)
        event = Event.objects.get(title='Build Fest')
        self.assertEqual(event.approval_status, Event.PENDING)
        self.assertEqual(event.event_type, 'Hackathon')
        self.assertEqual(event.eligibility, 'Everyone can apply')
        self.assertEqual(event.submission_type, Event.SUBMISSION_NONE)
        self.assertEqual(event.custom_sections, [{'title': 'Judging', 'description': 'Panel of mentors'}])

        resp = self.client.get('/api/v1/events/organizer/')
        self.assertEqual([e['title'] for e in resp.data], ['Build Fest'])

    def test_min_team_size_cannot_exceed_max(self):
        Organizer.objects.create(user=self.organizer, organization_name='Code Club', contact_email='org@example.com')
        self.payload.update(team_size_min=5, team_size_max=2)
        resp = self.client.post('/api/v1/events/create/', self.payload, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Minimum team size cannot exceed maximum team size.')

    def test_students_cannot_create_events(self):
        student = make_user('student@example.com')
        self.client.force_authenticate(user=student)
        resp = self.client.post('/api/v1/events/create/', self.payload, format='json')
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.data['redirect_to'], '/home')


class AdminReviewTest(TestCase):

    def setUp(self):
        self.admin = make_user('admin@example.com', role=UserRole.ADMIN)
        organizer = make_user('org@example.com', role=UserRole.ORGANIZER)
        profile = Organizer.objects.create(user=organizer, organization_name='Code Club', contact_email='club@example.com')
        self.event = make_event(approval_status=Event.PENDING, organizer_profile=profile)
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)

    def test_approve_emails_organizer_and_is_terminal(self):
        resp = self.client.post(f'/api/v1/events/admin/{self.event.id}/approve/')
        self.assertEqual(resp.status_code, 200)
        self.event.refresh_from_db()
        self.assertEqual(self.event.approval_status, Event.APPROVED)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['club@example.com'])

        resp = self.client.post(f'/api/v1/events/admin/{self.event.id}/reject/', {'reason': 'Too late'}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'This event has already been reviewed.')

    def test_reject_requires_reason(self):
        resp = self.client.post(f'/api/v1/events/admin/{self.event.id}/reject/', {'reason': '   '}, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Please provide a reason for rejection')

        resp = self.client.post(f'/api/v1/events/admin/{self.event.id}/reject/', {'reason': '  Missing details  '}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.event.refresh_from_db()
        self.assertEqual(self.event.approval_status, Event.REJECTED)
        self.assertEqual(self.event.rejection_reason, 'Missing details')

    def test_dashboard_stats(self):
        make_event(title='Live One')
        resp = self.client.get('/api/v1/events/admin/dashboard/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['stats'], {
            'totalEvents': 2,
            'pendingApprovals': 1,
            'totalUsers': 2,
            'totalRegistrations': 0,
        })
        self.assertEqual(len(resp.data['user_roles']), 2)

    def test_organizers_cannot_approve(self):
        organizer = User.objects.get(email='org@example.com')
        self.client.force_authenticate(user=organizer)
        resp = self.client.post(f'/api/v1/events/admin/{self.event.id}/approve/')
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.data['error'], 'This page is only accessible to admins')
