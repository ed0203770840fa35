# accounts/tests.py
import json
import shutil
import tempfile
from io import StringIO
from unittest import mock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings
from django.urls import reverse

from jobs import lifecycle
from jobs.models import Application, ApplicationEvent, Job
from jobs.tests import PASSWORD, RESUME, apply_as, make_admin, make_candidate, make_job, make_recruiter
from .identity import Identity, issue_operator_token, resolve_operator
from .models import CandidateProfile, RecruiterProfile, User

OPERATOR_SECRET = 'operator-secret-for-tests'


class JsonClientMixin:
    def login(self, user):
        self.assertTrue(self.client.login(username=user.username, password=PASSWORD))

    def post_json(self, url, payload, **extra):
        return self.client.post(url, data=json.dumps(payload), content_type='application/json', **extra)

    def patch_json(self, url, payload, **extra):
        return self.client.patch(url, data=json.dumps(payload), content_type='application/json', **extra)


class RegistrationTest(JsonClientMixin, TestCase):
    def test_candidate_registration_creates_profile(self):
        resp = self.post_json(reverse('register'), {
            'email': 'Ada@Example.com', 'password': PASSWORD, 'role': 'CANDIDATE',
            'first_name': 'Ada', 'phone': '555-0100',
        })
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['message'], "Registration successful! Please login to continue.")
        user = User.objects.get(email='ada@example.com')
        self.assertTrue(user.is_candidate())
        self.assertTrue(user.check_password(PASSWORD))
        self.assertEqual(user.candidate_profile.phone, '555-0100')
        self.assertIsNone(user.candidate_profile.resume_url)

    def test_recruiter_registration_needs_company(self):
        resp = self.post_json(reverse('register'), {
            'email': 'hr@acme.com', 'password': PASSWORD, 'role': 'RECRUITER',
        })
        self.assertEqual(resp.status_code, 400)
        self.assertIn('Company name and email required', resp.json()['error'])
        self.assertFalse(User.objects.exists())

        resp = self.post_json(reverse('register'), {
            'email': 'hr@acme.com', 'password': PASSWORD, 'role': 'RECRUITER',
            'company_name': 'Acme', 'company_email': 'jobs@acme.com',
        })
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(RecruiterProfile.objects.get().company_name, 'Acme')

    def test_duplicate_email_rejected(self):
        make_candidate('ada@example.com')
        resp = self.post_json(reverse('register'), {
            'email': 'ADA@example.com', 'password': PASSWORD, 'role': 'CANDIDATE',
        })
        self.assertEqual(resp.status_code, 400)
        self.assertIn('already exists', resp.json()['error'])

    def test_concurrent_duplicate_is_rejected(self):
        make_candidate('ada@example.com')
        # the other registration commits between the email check and the insert
        with mock.patch('accounts.forms.RegistrationForm.clean_email',
                        lambda form: form.cleaned_data['email'].lower()):
            resp = self.post_json(reverse('register'), {
                'email': 'ada@example.com', 'password': PASSWORD, 'role': 'CANDIDATE',
            })
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['error'], "User with this email already exists")
        self.assertEqual(User.objects.filter(email='ada@example.com').count(), 1)

    def test_admin_role_cannot_be_self_assigned(self):
        resp = self.post_json(reverse('register'), {
            'email': 'eve@example.com', 'password': PASSWORD, 'role': 'ADMIN',
        })
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(User.objects.filter(role=User.ROLE_ADMIN).exists())

    def test_short_password_rejected(self):
        resp = self.post_json(reverse('register'), {
            'email': 'ada@example.com', 'password': 'x1', 'role': 'CANDIDATE',
        })
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['code'], 'validation')

    def test_bad_json_rejected(self):
        resp = self.client.post(reverse('register'), data='{not json', content_type='application/json')
        self.assertEqual(resp.status_code, 400)


class SessionTest(JsonClientMixin, TestCase):
    def setUp(self):
        self.candidate = make_candidate('ada@example.com', first_name='Ada')

    def test_login_me_logout(self):
        resp = self.post_json(reverse('login'), {'email': 'ADA@example.com', 'password': PASSWORD})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['user']['role'], 'CANDIDATE')

        me = self.client.get(reverse('me')).json()['user']
        self.assertEqual(me['email'], 'ada@example.com')
        self.assertEqual(me['first_name'], 'Ada')
        self.assertEqual(me['profile']['resume_url'], RESUME)

        self.assertEqual(self.client.post(reverse('logout')).status_code, 200)
        self.assertEqual(self.client.get(reverse('me')).status_code, 401)

    def test_wrong_password(self):
        resp = self.post_json(reverse('login'), {'email': 'ada@example.com', 'password': 'nope-nope'})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()['error'], "Invalid login credentials")

    def test_csrf_endpoint_sets_cookie(self):
        resp = self.client.get(reverse('csrf'))
        self.assertEqual(resp.status_code, 200)
        self.assertIn('csrftoken', resp.cookies)

    def test_candidate_profile_update(self):
        self.login(self.candidate)
        resp = self.patch_json(reverse('me'), {'phone': '555-0199', 'last_name': 'Lovelace'})
        self.assertEqual(resp.status_code, 200)
        self.candidate.refresh_from_db()
        self.assertEqual(self.candidate.first_name, 'Ada')
        self.assertEqual(self.candidate.last_name, 'Lovelace')
        profile = CandidateProfile.objects.get(user=self.candidate)
        self.assertEqual(profile.phone, '555-0199')
        self.assertEqual(profile.resume_url, RESUME)

    def test_invalid_profile_update_changes_nothing(self):
        self.login(self.candidate)
        resp = self.patch_json(reverse('me'), {'first_name': 'Grace', 'portfolio_url': 'not a url'})
        self.assertEqual(resp.status_code, 400)
        self.candidate.refresh_from_db()
        self.assertEqual(self.candidate.first_name, 'Ada')

    def test_recruiter_profile_update(self):
        recruiter = make_recruiter('hr@acme.com')
        self.login(recruiter)
        resp = self.patch_json(reverse('me'), {'company_name': 'Acme Corp'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['user']['profile']['company_name'], 'Acme Corp')


class UploadTest(JsonClientMixin, TestCase):
    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.media_root, ignore_errors=True)
        self.candidate = make_candidate('ada@example.com', resume_url=None)

    def upload(self, kind, name, content, content_type):
        return self.client.post(reverse('upload'), {
            'type': kind,
            'file': SimpleUploadedFile(name, content, content_type=content_type),
        })

    def test_resume_upload_updates_profile(self):
        self.login(self.candidate)
        with override_settings(MEDIA_ROOT=self.media_root):
            resp = self.upload('resume', 'CV.PDF', b'%PDF-1.4 resume', 'application/pdf')
        self.assertEqual(resp.status_code, 200)
        url = resp.json()['url']
        self.assertTrue(url.startswith(f'http://testserver/media/resumes/{self.candidate.id}-'))
        self.assertTrue(url.endswith('.pdf'))
        self.assertEqual(CandidateProfile.objects.get(user=self.candidate).resume_url, url)

        # the new resume unlocks applying
        job = make_job(make_recruiter('hr@acme.com'))
        self.assertEqual(apply_as(User.objects.get(pk=self.candidate.pk), job).resume_url, url)

    def test_photo_upload(self):
        self.login(self.candidate)
        with override_settings(MEDIA_ROOT=self.media_root):
            resp = self.upload('photo', 'me.png', b'\x89PNG fake', 'image/png')
        self.assertEqual(resp.status_code, 200)
        self.assertIn('/media/photos/', resp.json()['url'])
        self.assertEqual(CandidateProfile.objects.get(user=self.candidate).photo_url, resp.json()['url'])

    def test_wrong_content_type(self):
        self.login(self.candidate)
        resp = self.upload('resume', 'cv.docx', b'PK', 'application/msword')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('Only PDF files are allowed', resp.json()['error'])
        resp = self.upload('photo', 'me.gif', b'GIF89a', 'image/gif')
        self.assertIn('Invalid image type', resp.json()['error'])
        self.assertIsNone(CandidateProfile.objects.get(user=self.candidate).photo_url)

    def test_oversized_file(self):
        self.login(self.candidate)
        resp = self.upload('photo', 'big.jpg', b'0' * (5 * 1024 * 1024 + 1), 'image/jpeg')
        self.assertEqual(resp.status_code, 400)
        self.assertIn('Image must be less than 5MB', resp.json()['error'])

    def test_unknown_type(self):
        self.login(self.candidate)
        resp = self.upload('avatar', 'me.png', b'x', 'image/png')
        self.assertEqual(resp.status_code, 400)

    def test_storage_failure_leaves_profile_untouched(self):
        self.login(self.candidate)
        with mock.patch('accounts.uploads.default_storage') as storage:
            storage.save.side_effect = OSError("bucket unavailable")
            resp = self.upload('resume', 'cv.pdf', b'%PDF-1.4', 'application/pdf')
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {'error': "Failed to upload file", 'code': 'upstream'})
        self.assertIsNone(CandidateProfile.objects.get(user=self.candidate).resume_url)

    def test_recruiters_cannot_upload(self):
        self.login(make_recruiter('hr@acme.com'))
        resp = self.upload('resume', 'cv.pdf', b'%PDF-1.4', 'application/pdf')
        self.assertEqual(resp.status_code, 403)


@override_settings(OPERATOR_TOKEN_SECRET=OPERATOR_SECRET)
class OperatorTokenTest(JsonClientMixin, TestCase):
    def test_token_grants_admin(self):
        token = issue_operator_token('ops')
        resp = self.client.get(reverse('admin_overview'), HTTP_X_OPERATOR_TOKEN=token)
        self.assertEqual(resp.status_code, 200)

        me = self.client.get(reverse('me'), HTTP_X_OPERATOR_TOKEN=token).json()['user']
        self.assertEqual(me['id'], 'operator:ops')
        self.assertEqual(me['role'], 'ADMIN')
        self.assertTrue(me['operator'])

    def test_operator_has_no_profile_to_patch(self):
        token = issue_operator_token('ops')
        resp = self.patch_json(reverse('me'), {'first_name': 'x'}, HTTP_X_OPERATOR_TOKEN=token)
        self.assertEqual(resp.status_code, 403)

    def test_tampered_token_ignored(self):
        token = issue_operator_token('ops')
        resp = self.client.get(reverse('admin_overview'), HTTP_X_OPERATOR_TOKEN=token + 'x')
        self.assertEqual(resp.status_code, 401)

    def test_expired_token_ignored(self):
        with mock.patch('django.core.signing.time.time', return_value=1_000_000):
            token = issue_operator_token('ops')
        self.assertIsNone(resolve_operator(token))

    def test_rotating_the_secret_revokes_tokens(self):
        token = issue_operator_token('ops')
        with override_settings(OPERATOR_TOKEN_SECRET='rotated'):
            self.assertIsNone(resolve_operator(token))

    def test_no_secret_means_no_operators(self):
        token = issue_operator_token('ops')
        with override_settings(OPERATOR_TOKEN_SECRET=''):
            self.assertIsNone(resolve_operator(token))
            with self.assertRaises(ValueError):
                issue_operator_token('ops')

    def test_operator_status_change_is_attributed(self):
        recruiter = make_recruiter('hr@acme.com')
        app = apply_as(make_candidate('ada@example.com'), make_job(recruiter))
        token = issue_operator_token('ops')
        resp = self.patch_json(reverse('application_status', args=[app.id]), {'status': 'REJECTED'},
                               HTTP_X_OPERATOR_TOKEN=token)
        self.assertEqual(resp.status_code, 200)
        event = app.events.last()
        self.assertEqual(event.actor_label, 'operator:ops')
        self.assertIsNone(event.actor)

    def test_management_command(self):
        out = StringIO()
        call_command('issue_operator_token', 'night-shift', stdout=out, stderr=StringIO())
        identity = resolve_operator(out.getvalue().strip())
        self.assertEqual(identity.user_id, 'operator:night-shift')
        self.assertTrue(identity.is_admin)

    def test_management_command_needs_secret(self):
        with override_settings(OPERATOR_TOKEN_SECRET=''):
            with self.assertRaises(CommandError):
                call_command('issue_operator_token', 'ops', stdout=StringIO(), stderr=StringIO())


class AdminConsoleTest(JsonClientMixin, TestCase):
    def setUp(self):
        self.admin = make_admin()
        self.recruiter = make_recruiter('hr@acme.com')
        self.candidates = [make_candidate(f'c{i}@example.com') for i in range(3)]
        self.job_a = make_job(self.recruiter, title='Backend')
        self.job_b = make_job(self.recruiter, title='Frontend', status='CLOSED')
        for candidate in self.candidates:
            apply_as(candidate, self.job_a)
        # closed jobs no longer take applications, so add these directly
        for candidate in self.candidates[:2]:
            Application.objects.create(job=self.job_b, candidate=candidate, resume_url=RESUME)
        owner = Identity.from_user(self.recruiter)
        lifecycle.update_status(owner, self.job_a.applications.first().id, 'SHORTLISTED')

    def test_non_admins_are_refused(self):
        url = reverse('admin_overview')
        self.assertEqual(self.client.get(url).status_code, 401)
        self.login(self.recruiter)
        self.assertEqual(self.client.get(url).status_code, 403)
        self.assertEqual(self.client.get(reverse('admin_users')).status_code, 403)

    def test_overview_counts(self):
        self.login(self.admin)
        data = self.client.get(reverse('admin_overview')).json()
        stats = data['stats']
        self.assertEqual(stats['total_users'], 5)
        self.assertEqual(stats['total_candidates'], 3)
        self.assertEqual(stats['total_recruiters'], 1)
        self.assertEqual((stats['total_jobs'], stats['open_jobs'], stats['closed_jobs']), (2, 1, 1))
        self.assertEqual(stats['total_applications'], 5)
        self.assertEqual(stats['application_status'],
                         {'PENDING': 4, 'VIEWED': 0, 'SHORTLISTED': 1, 'REJECTED': 0})
        self.assertEqual(sum(stats['application_status'].values()), stats['total_applications'])
        self.assertEqual(len(data['recent_users']), 5)
        self.assertEqual({j['company'] for j in data['recent_jobs']}, {'Acme'})

    def test_user_listing(self):
        self.login(self.admin)
        resp = self.client.get(reverse('admin_users'), {'role': 'RECRUITER'}).json()
        self.assertEqual(len(resp['users']), 1)
        self.assertEqual(resp['users'][0]['jobs_count'], 2)
        self.assertEqual(resp['users'][0]['profile']['company_name'], 'Acme')

        candidates = self.client.get(reverse('admin_users'), {'role': 'CANDIDATE'}).json()['users']
        self.assertEqual(sorted(u['applications_count'] for u in candidates), [1, 2, 2])

        page = self.client.get(reverse('admin_users'), {'limit': 2, 'page': 3}).json()
        self.assertEqual(len(page['users']), 1)
        self.assertEqual(page['pagination']['total'], 5)

        self.assertEqual(self.client.get(reverse('admin_users'), {'role': 'ROOT'}).status_code, 400)

    def test_admin_cannot_delete_self(self):
        self.login(self.admin)
        resp = self.client.delete(reverse('admin_delete_user', args=[self.admin.id]))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['error'], "Cannot delete yourself")
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_delete_missing_user(self):
        self.login(self.admin)
        self.assertEqual(self.client.delete(reverse('admin_delete_user', args=[999999])).status_code, 404)

    def test_deleting_recruiter_removes_jobs_and_applications(self):
        self.login(self.admin)
        resp = self.client.delete(reverse('admin_delete_user', args=[self.recruiter.id]))
        self.assertEqual(resp.status_code, 200)

        self.assertFalse(Job.objects.exists())
        self.assertFalse(Application.objects.exists())
        self.assertFalse(ApplicationEvent.objects.exists())
        self.assertFalse(RecruiterProfile.objects.exists())
        self.assertEqual(self.client.get(reverse('jobs')).json()['jobs'], [])

        for candidate in self.candidates:
            self.login(candidate)
            mine = self.client.get(reverse('applications'), {'mine': 'true'}).json()
            self.assertEqual(mine['applications'], [])
            self.assertEqual(mine['stats']['total'], 0)
