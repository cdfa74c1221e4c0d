from types import SimpleNamespace
from unittest import mock

from django.test import TestCase, SimpleTestCase
from django.utils import timezone
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from accounts.models import User, UserRole
from events.models import Event
from registrations.models import Registration, TeamMember
from registrations.roster import TeamRoster
from registrations.services import register_team
from submissions.models import Submission


def member(name, leader=False, **overrides):
    data = {
        'name': name,
        'email': f'{name.lower()}@example.com',
        'phone': '9876543210',
        'college_name': 'Anna University',
        'is_leader': leader,
    }
    data.update(overrides)
    return data


class TeamRosterTest(SimpleTestCase):

    def setUp(self):
        self.event = SimpleNamespace(team_size_min=2, team_size_max=3)

    def test_starts_with_leader_and_stops_at_max(self):
        roster = TeamRoster(self.event, leader={'name': 'Asha'})
        self.assertEqual(len(roster), 1)
        self.assertTrue(roster.members[0]['is_leader'])

        roster.add_member({'name': 'Ben'})
        roster.add_member({'name': 'Cara', 'is_leader': True})
        self.assertTrue(roster.is_full)
        self.assertFalse(roster.members[2]['is_leader'])
        with self.assertRaisesMessage(ValidationError, "Maximum team size reached"):
            roster.add_member()

    def test_leader_cannot_be_removed(self):
        roster = TeamRoster(self.event)
        roster.add_member({'name': 'Ben'})
        with self.assertRaisesMessage(ValidationError, "Cannot remove team leader"):
            roster.remove_member(0)
        roster.remove_member(1)
        self.assertEqual(len(roster), 1)


class RegisterTeamTest(TestCase):

    def setUp(self):
        self.student = User.objects.create_user(email='student@example.com', full_name='Asha', password='Password1')
        UserRole.objects.create(user=self.student, role=UserRole.STUDENT)
        now = timezone.now()
        self.event = Event.objects.create(
            title='Team Hack',
            organizer='Code Club',
            location='Online',
            event_date=now + timezone.timedelta(days=10),
            registration_deadline=now + timezone.timedelta(days=5),
            team_size_min=2,
            team_size_max=4,
            total_slots=10,
            description='Teams of two to four.',
            approval_status=Event.APPROVED,
        )
        self.url = f'/api/v1/registrations/events/{self.event.id}/register/'
        self.client = APIClient()
        self.client.force_authenticate(user=self.student)

    def post(self, members, **extra):
        return self.client.post(self.url, {'members': members, **extra}, format='json')

    def test_team_size_bounds(self):
        resp = self.post([member('Asha', leader=True)])
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Minimum team size is 2 members')

        resp = self.post([member('Asha', leader=True)] + [member(f'M{i}') for i in range(4)])
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Maximum team size is 4 members')

        self.assertEqual(Registration.objects.count(), 0)

    def test_successful_registration(self):
        resp = self.post([member('Asha', leader=True), member('Ben'), member('Cara')], team_name='Byte Me')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['redirect_to'], f'/event/{self.event.id}')

        registration = Registration.objects.get(user=self.student, event=self.event)
        self.assertEqual(registration.payment_status, Registration.PAYMENT_COMPLETED)
        self.assertEqual(registration.members.count(), 3)
        self.assertEqual(registration.leader.name, 'Asha')
        self.event.refresh_from_db()
        self.assertEqual(self.event.registered_count, 1)

    def test_paid_event_leaves_payment_pending(self):
        self.event.registration_fee = 200
        self.event.save()
        resp = self.post([member('Asha', leader=True), member('Ben')])
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['registration']['payment_status'], Registration.PAYMENT_PENDING)

    def test_member_field_errors_are_prefixed(self):
        resp = self.post([member('Asha', leader=True), member('Ben', phone='12345')])
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'phone: Phone number must be exactly 10 digits')

    def test_exactly_one_leader(self):
        resp = self.post([member('Asha'), member('Ben')])
        self.assertEqual(resp.data['error'], 'Exactly one team leader is required')
        resp = self.post([member('Asha', leader=True), member('Ben', leader=True)])
        self.assertEqual(resp.data['error'], 'Exactly one team leader is required')

    def test_deadline_slots_and_duplicates(self):
        team = [member('Asha', leader=True), member('Ben')]
        self.assertEqual(self.post(team).status_code, 201)
        resp = self.post(team)
        self.assertEqual(resp.data['error'], 'You are already registered for this event.')

        Registration.objects.all().delete()
        self.event.registered_count = 10
        self.event.save()
        resp = self.post(team)
        self.assertEqual(resp.data['error'], 'All slots for this event are filled.')

        self.event.registered_count = 0
        self.event.registration_deadline = timezone.now() - timezone.timedelta(hours=1)
        self.event.save()
        resp = self.post(team)
        self.assertEqual(resp.data['error'], 'Registration deadline has passed.')

    def test_failed_member_insert_rolls_back(self):
        with mock.patch('registrations.services.TeamMember.objects.bulk_create', side_effect=RuntimeError('db down')):
            with self.assertRaises(RuntimeError):
                self.post([member('Asha', leader=True), member('Ben')])

        self.assertFalse(Registration.objects.exists())
        self.assertFalse(TeamMember.objects.exists())
        self.event.refresh_from_db()
        self.assertEqual(self.event.registered_count, 0)

    def test_last_slot_goes_to_one_team(self):
        self.event.total_slots = 1
        self.event.save()
        stale_event = Event.objects.get(pk=self.event.pk)
        rival = User.objects.create_user(email='rival@example.com', password='Password1')
        UserRole.objects.create(user=rival, role=UserRole.STUDENT)

        register_team(self.student, self.event, [member('Asha', leader=True), member('Ben')])
        # stale_event still reads registered_count == 0
        with self.assertRaisesMessage(ValidationError, "All slots for this event are filled."):
            register_team(rival, stale_event, [member('Dev', leader=True), member('Esha')])

        self.event.refresh_from_db()
        self.assertEqual(self.event.registered_count, 1)
        self.assertFalse(Registration.objects.filter(user=rival).exists())
        self.assertFalse(TeamMember.objects.filter(name='Dev').exists())

    def test_duplicate_insert_is_reported_as_already_registered(self):
        Registration.objects.create(user=self.student, event=self.event)
        with mock.patch('registrations.services.check_registration_open'):
            with self.assertRaisesMessage(ValidationError, "You are already registered for this event."):
                register_team(self.student, self.event, [member('Asha', leader=True), member('Ben')])

        self.assertEqual(Registration.objects.filter(user=self.student).count(), 1)
        self.event.refresh_from_db()
        self.assertEqual(self.event.registered_count, 0)

    def test_organizers_cannot_register(self):
        organizer = User.objects.create_user(email='org@example.com', password='Password1')
        UserRole.objects.create(user=organizer, role=UserRole.ORGANIZER)
        self.client.force_authenticate(user=organizer)
        resp = self.post([member('Asha', leader=True), member('Ben')])
        self.assertEqual(resp.status_code, 403)


class CancelRegistrationTest(TestCase):

    def setUp(self):
        self.student = User.objects.create_user(email='student@example.com', password='Password1')
        UserRole.objects.create(user=self.student, role=UserRole.STUDENT)
        now = timezone.now()
        self.event = Event.objects.create(
            title='Solo Sprint',
            organizer='Code Club',
            location='Online',
            event_date=now + timezone.timedelta(days=10),
            registration_deadline=now + timezone.timedelta(days=5),
            description='Solo.',
            registered_count=1,
            approval_status=Event.APPROVED,
        )
        self.registration = Registration.objects.create(user=self.student, event=self.event)
        TeamMember.objects.create(
            registration=self.registration, name='Asha', email='asha@example.com',
            phone='9876543210', college_name='Anna University', is_leader=True
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.student)

    def test_cancel_frees_the_slot(self):
        resp = self.client.delete(f'/api/v1/registrations/{self.registration.id}/')
        self.assertEqual(resp.status_code, 204)
        self.assertFalse(Registration.objects.exists())
        self.assertFalse(TeamMember.objects.exists())
        self.event.refresh_from_db()
        self.assertEqual(self.event.registered_count, 0)

    def test_counter_never_goes_negative(self):
        Event.objects.filter(pk=self.event.pk).update(registered_count=0)
        self.client.delete(f'/api/v1/registrations/{self.registration.id}/')
        self.event.refresh_from_db()
        self.assertEqual(self.event.registered_count, 0)

    def test_cannot_cancel_after_submitting(self):
        Submission.objects.create(registration=self.registration, event=self.event, github_link='https://github.com/a/b')
        resp = self.client.delete(f'/api/v1/registrations/{self.registration.id}/')
        self.assertEqual(resp.status_code, 400)
        self.assertTrue(Registration.objects.filter(pk=self.registration.pk).exists())

    def test_other_users_registration_is_not_found(self):
        other = User.objects.create_user(email='other@example.com', password='Password1')
        self.client.force_authenticate(user=other)
        resp = self.client.delete(f'/api/v1/registrations/{self.registration.id}/')
        self.assertEqual(resp.status_code, 404)

    def test_my_registrations(self):
        resp = self.client.get('/api/v1/registrations/mine/')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(resp.data[0]['event']['title'], 'Solo Sprint')
        self.assertEqual(resp.data[0]['members'][0]['name'], 'Asha')
