from django.test import TestCase, SimpleTestCase
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIClient

from accounts.models import User, UserRole, Profile, Organizer
from accounts.permissions import check_role
from accounts.validators import validate_phone, validate_password_strength


class ValidatorTest(SimpleTestCase):

    def test_phone_needs_exactly_ten_digits(self):
        self.assertEqual(validate_phone('9876543210'), '9876543210')
        for bad in ['987654321', '98765432101', '98765abcde', '']:
            with self.assertRaisesMessage(ValidationError, "Phone number must be exactly 10 digits"):
                validate_phone(bad)

    def test_password_strength_reports_first_missing_rule(self):
        with self.assertRaisesMessage(ValidationError, "Password must be at least 8 characters"):
            validate_password_strength('Ab1')
        with self.assertRaisesMessage(ValidationError, "Password must contain at least one uppercase letter"):
            validate_password_strength('abcdefg1')
        with self.assertRaisesMessage(ValidationError, "Password must contain at least one number"):
            validate_password_strength('Abcdefgh')
        self.assertEqual(validate_password_strength('Abcdefg1'), 'Abcdefg1')


class RoleGateTest(TestCase):

    def setUp(self):
        self.student = User.objects.create_user(email='student@example.com', full_name='Stu Dent', password='Password1')
        UserRole.objects.create(user=self.student, role=UserRole.STUDENT)
        self.no_role = User.objects.create_user(email='norole@example.com', password='Password1')
        self.client = APIClient()

    def test_check_role_outcomes(self):
        self.assertTrue(check_role(self.student, UserRole.STUDENT).authorized)

        mismatch = check_role(self.student, UserRole.ADMIN)
        self.assertFalse(mismatch.authorized)
        self.assertEqual(mismatch.redirect_to, '/home')
        self.assertEqual(mismatch.message, 'This page is only accessible to admins')

        missing = check_role(self.no_role, UserRole.STUDENT)
        self.assertEqual(missing.redirect_to, '/home')
        self.assertEqual(missing.message, 'Unable to verify your role')

    def test_role_check_endpoint(self):
        resp = self.client.get('/api/v1/accounts/role-check/', {'role': 'organizer'})
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.data['authorized'])
        self.assertEqual(resp.data['redirect_to'], '/')

        self.client.force_authenticate(user=self.student)
        resp = self.client.get('/api/v1/accounts/role-check/', {'role': 'student'})
        self.assertTrue(resp.data['authorized'])

    def test_wrong_role_gets_403_with_redirect(self):
        self.client.force_authenticate(user=self.student)
        resp = self.client.get('/api/v1/accounts/organizer-profile/')
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.data['error'], 'This page is only accessible to organizers')
        self.assertEqual(resp.data['redirect_to'], '/home')

    def test_anonymous_gets_401_with_redirect(self):
        resp = self.client.get('/api/v1/accounts/organizer-profile/')
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.data['redirect_to'], '/')


class SignupLoginTest(TestCase):

    def setUp(self):
        self.client = APIClient()

    def test_signup_assigns_student_role(self):
        resp = self.client.post('/api/v1/accounts/signup/', {
            'name': 'New Student',
            'email': 'new@example.com',
            'password': 'Password1',
            'confirm_password': 'Password1',
        }, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['redirect_to'], '/user-info')
        self.assertIn('access_token', resp.data)
        user = User.objects.get(email='new@example.com')
        self.assertEqual(user.role, UserRole.STUDENT)

    def test_signup_rejects_mismatched_passwords(self):
        resp = self.client.post('/api/v1/accounts/signup/', {
            'name': 'New Student',
            'email': 'new@example.com',
            'password': 'Password1',
            'confirm_password': 'Password2',
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'confirm_password: Passwords do not match')
        self.assertFalse(User.objects.filter(email='new@example.com').exists())

    def test_login_redirects_by_profile(self):
        user = User.objects.create_user(email='login@example.com', full_name='Log In', password='Password1')
        UserRole.objects.create(user=user, role=UserRole.STUDENT)

        resp = self.client.post('/api/v1/accounts/login/', {'email': 'login@example.com', 'password': 'Password1'}, format='json')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.data['redirect_to'], '/user-info')

        Profile.objects.create(
            user=user, full_name='Log In', college_name='IIT', degree='BTech', passout_year=2026, heard_from='Friends'
        )
        resp = self.client.post('/api/v1/accounts/login/', {'email': 'login@example.com', 'password': 'Password1'}, format='json')
        self.assertEqual(resp.data['redirect_to'], '/home')

    def test_login_with_wrong_password(self):
        User.objects.create_user(email='login@example.com', password='Password1')
        resp = self.client.post('/api/v1/accounts/login/', {'email': 'login@example.com', 'password': 'nope'}, format='json')
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.data['error'], 'Invalid login credentials')


class ProfileTest(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(email='p@example.com', password='Password1')
        UserRole.objects.create(user=self.user, role=UserRole.ORGANIZER)
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_profile_missing_then_created(self):
        resp = self.client.get('/api/v1/accounts/profile/')
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data['redirect_to'], '/user-info')

        resp = self.client.post('/api/v1/accounts/profile/', {
            'full_name': 'Pat',
            'college_name': 'NIT',
            'degree': 'BSc',
            'passout_year': 2019,
            'heard_from': 'Instagram',
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'passout_year: Year must be 2020 or later')

        resp = self.client.post('/api/v1/accounts/profile/', {
            'full_name': 'Pat',
            'college_name': 'NIT',
            'degree': 'BSc',
            'passout_year': 2025,
            'heard_from': 'Instagram',
        }, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data['redirect_to'], '/home')
        self.assertTrue(Profile.objects.filter(user=self.user).exists())

    def test_organizer_profile_phone_is_validated(self):
        resp = self.client.post('/api/v1/accounts/organizer-profile/', {
            'organization_name': 'Code Club',
            'contact_email': 'club@example.com',
            'contact_phone': '12345',
        }, format='json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'contact_phone: Phone number must be exactly 10 digits')

        resp = self.client.post('/api/v1/accounts/organizer-profile/', {
            'organization_name': 'Code Club',
            'contact_email': 'club@example.com',
            'contact_phone': '9876543210',
        }, format='json')
        self.assertEqual(resp.status_code, 201)
        self.assertTrue(Organizer.objects.filter(user=self.user).exists())
