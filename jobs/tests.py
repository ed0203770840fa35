# jobs/tests.py
import datetime
import json
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models.query import QuerySet
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from accounts.identity import Identity
from accounts.models import CandidateProfile, RecruiterProfile
from hirenest.errors import Conflict, NotFound, Unauthorized, ValidationFailed
from . import lifecycle, reporting
from .models import Application, ApplicationEvent, Job

User = get_user_model()
PASSWORD = 'Sturdy-pass-42'
RESUME = 'https://files.example.com/resumes/cv.pdf'


def make_candidate(email, resume_url=RESUME, **extra):
    user = User.objects.create_user(username=email, email=email, password=PASSWORD,
                                    role=User.ROLE_CANDIDATE, **extra)
    CandidateProfile.objects.create(user=user, resume_url=resume_url, phone='555-0100')
    return user


def make_recruiter(email, company='Acme'):
    user = User.objects.create_user(username=email, email=email, password=PASSWORD, role=User.ROLE_RECRUITER)
    RecruiterProfile.objects.create(user=user, company_name=company, company_email=f'jobs@{company.lower()}.com')
    return user


def make_admin(email='admin@example.com'):
    return User.objects.create_user(username=email, email=email, password=PASSWORD, role=User.ROLE_ADMIN)


def make_job(recruiter, title='Backend Engineer', **fields):
    values = {'description': 'Build and run APIs', 'location': 'Remote'}
    values.update(fields)
    return Job.objects.create(recruiter=recruiter, title=title, **values)


def apply_as(user, job):
    return lifecycle.apply_to_job(Identity.from_user(user), job.id)


class ApiTestCase(TestCase):
    def login(self, user):
        self.assertTrue(self.client.login(username=user.username, password=PASSWORD))

    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type='application/json')

    def patch_json(self, url, payload):
        return self.client.patch(url, data=json.dumps(payload), content_type='application/json')

    def set_status(self, app, status):
        return self.patch_json(reverse('application_status', args=[app.id]), {'status': status})


class TransitionTableTest(TestCase):
    def test_forward_moves_are_allowed(self):
        allowed = [
            ('PENDING', 'VIEWED'), ('PENDING', 'SHORTLISTED'), ('PENDING', 'REJECTED'),
            ('VIEWED', 'SHORTLISTED'), ('VIEWED', 'REJECTED'),
        ]
        for current, target in allowed:
            self.assertTrue(lifecycle.can_transition(current, target), (current, target))
            lifecycle.check_transition(current, target)

    def test_terminal_states_allow_nothing(self):
        for current in ('SHORTLISTED', 'REJECTED'):
            self.assertTrue(lifecycle.is_terminal(current))
            for target in lifecycle.STATUSES:
                self.assertFalse(lifecycle.can_transition(current, target))
                with self.assertRaises(ValidationFailed):
                    lifecycle.check_transition(current, target)

    def test_backward_noop_and_unknown_targets_fail(self):
        for current, target in [('VIEWED', 'PENDING'), ('PENDING', 'PENDING'), ('VIEWED', 'VIEWED'),
                                ('PENDING', 'ARCHIVED'), ('PENDING', 'viewed'), ('PENDING', None)]:
            with self.assertRaises(ValidationFailed):
                lifecycle.check_transition(current, target)


class ApplyTest(ApiTestCase):
    def setUp(self):
        self.recruiter = make_recruiter('hr@acme.com')
        self.job = make_job(self.recruiter)
        self.candidate = make_candidate('ada@example.com')

    def test_apply_creates_pending_application(self):
        self.login(self.candidate)
        resp = self.post_json(reverse('applications'), {'job_id': self.job.id, 'cover_letter': 'Hello'})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()['application']
        self.assertEqual(body['status'], 'PENDING')
        self.assertEqual(body['resume_url'], RESUME)
        self.assertEqual(body['cover_letter'], 'Hello')

        app = Application.objects.get(pk=body['id'])
        event = app.events.get()
        self.assertEqual((event.from_status, event.to_status), ('', 'PENDING'))
        self.assertEqual(event.actor, self.candidate)

    def test_resume_is_a_snapshot(self):
        app = apply_as(self.candidate, self.job)
        profile = self.candidate.candidate_profile
        profile.resume_url = 'https://files.example.com/resumes/new.pdf'
        profile.save()
        app.refresh_from_db()
        self.assertEqual(app.resume_url, RESUME)

    def test_second_apply_is_rejected(self):
        self.login(self.candidate)
        first = self.post_json(reverse('applications'), {'job_id': self.job.id})
        second = self.post_json(reverse('applications'), {'job_id': self.job.id})
        self.assertEqual(first.status_code, 200)
        self.assertEqual(second.status_code, 400)
        self.assertEqual(second.json()['code'], 'conflict')
        self.assertIn('already applied', second.json()['error'])
        self.assertEqual(Application.objects.filter(job=self.job).count(), 1)

    def test_candidate_without_resume_cannot_apply(self):
        no_cv = make_candidate('bob@example.com', resume_url=None)
        self.login(no_cv)
        resp = self.post_json(reverse('applications'), {'job_id': self.job.id})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('resume', resp.json()['error'])
        self.assertFalse(Application.objects.exists())

    def test_resume_is_checked_before_the_job(self):
        no_cv = make_candidate('bob@example.com', resume_url=None)
        self.login(no_cv)
        resp = self.post_json(reverse('applications'), {'job_id': 999999})
        self.assertEqual(resp.status_code, 400)

    def test_anonymous_cannot_apply(self):
        resp = self.post_json(reverse('applications'), {'job_id': self.job.id})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()['code'], 'unauthenticated')

    def test_recruiter_cannot_apply(self):
        self.login(self.recruiter)
        resp = self.post_json(reverse('applications'), {'job_id': self.job.id})
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()['code'], 'unauthorized')

    def test_unknown_job(self):
        self.login(self.candidate)
        resp = self.post_json(reverse('applications'), {'job_id': 999999})
        self.assertEqual(resp.status_code, 404)

    def test_job_id_required(self):
        self.login(self.candidate)
        resp = self.post_json(reverse('applications'), {})
        self.assertEqual(resp.status_code, 400)

    def test_job_id_must_be_a_whole_number(self):
        self.login(self.candidate)
        for job_id in (True, self.job.id + 0.7, 'abc', [self.job.id]):
            resp = self.post_json(reverse('applications'), {'job_id': job_id})
            self.assertEqual(resp.status_code, 400, job_id)
            self.assertEqual(resp.json()['error'], "Job ID must be an integer")
        self.assertFalse(Application.objects.exists())

    def test_job_id_may_be_a_digit_string(self):
        self.login(self.candidate)
        resp = self.post_json(reverse('applications'), {'job_id': str(self.job.id)})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['application']['job_id'], self.job.id)

    def test_role_is_checked_before_the_body(self):
        self.login(self.recruiter)
        resp = self.client.post(reverse('applications'), data='{', content_type='application/json')
        self.assertEqual(resp.status_code, 403)
        resp = self.post_json(reverse('applications'), {'job_id': self.job.id, 'cover_letter': 'x' * 6000})
        self.assertEqual(resp.status_code, 403)

    def test_resume_is_checked_before_the_body(self):
        no_cv = make_candidate('bob@example.com', resume_url=None)
        self.login(no_cv)
        for body in ('{', json.dumps({'job_id': self.job.id, 'cover_letter': 'x' * 6000})):
            resp = self.client.post(reverse('applications'), data=body, content_type='application/json')
            self.assertEqual(resp.status_code, 400)
            self.assertIn('upload a resume', resp.json()['error'])

    def test_cover_letter_length_is_limited(self):
        self.login(self.candidate)
        resp = self.post_json(reverse('applications'), {'job_id': self.job.id, 'cover_letter': 'x' * 6000})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(Application.objects.exists())

    def test_closing_a_job_keeps_existing_applications(self):
        first = apply_as(self.candidate, self.job)
        self.login(self.recruiter)
        self.assertEqual(self.client.post(reverse('job_close', args=[self.job.id])).status_code, 200)

        late = make_candidate('late@example.com')
        self.login(late)
        resp = self.post_json(reverse('applications'), {'job_id': self.job.id})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('no longer accepting applications', resp.json()['error'])

        first.refresh_from_db()
        self.assertEqual(first.status, 'PENDING')
        self.assertEqual(Application.objects.filter(job=self.job).count(), 1)

    def test_unique_constraint_rejects_duplicates(self):
        apply_as(self.candidate, self.job)
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Application.objects.create(job=self.job, candidate=self.candidate, resume_url=RESUME)

    def test_race_past_the_precheck_is_a_conflict(self):
        apply_as(self.candidate, self.job)
        # the other request's row lands between our check and our insert
        with mock.patch.object(QuerySet, 'exists', return_value=False):
            with self.assertRaises(Conflict):
                apply_as(self.candidate, self.job)
        self.assertEqual(Application.objects.filter(job=self.job).count(), 1)


class UpdateStatusTest(ApiTestCase):
    def setUp(self):
        self.owner = make_recruiter('owner@acme.com')
        self.other = make_recruiter('other@globex.com', company='Globex')
        self.candidate = make_candidate('ada@example.com')
        self.job = make_job(self.owner)
        self.app = apply_as(self.candidate, self.job)

    def assertStatus(self, status):
        self.app.refresh_from_db()
        self.assertEqual(self.app.status, status)

    def test_owner_walks_the_happy_path(self):
        self.login(self.owner)
        self.assertEqual(self.set_status(self.app, 'VIEWED').status_code, 200)
        self.assertEqual(self.set_status(self.app, 'SHORTLISTED').status_code, 200)
        self.assertStatus('SHORTLISTED')
        moves = list(self.app.events.values_list('from_status', 'to_status'))
        self.assertEqual(moves, [('', 'PENDING'), ('PENDING', 'VIEWED'), ('VIEWED', 'SHORTLISTED')])

    def test_decision_without_viewing_first(self):
        self.login(self.owner)
        self.assertEqual(self.set_status(self.app, 'REJECTED').status_code, 200)
        self.assertStatus('REJECTED')

    def test_rejected_is_terminal(self):
        self.login(self.owner)
        self.assertEqual(self.set_status(self.app, 'REJECTED').status_code, 200)
        resp = self.set_status(self.app, 'SHORTLISTED')
        self.assertEqual(resp.status_code, 400)
        self.assertStatus('REJECTED')

    def test_backward_move_is_rejected(self):
        self.login(self.owner)
        self.set_status(self.app, 'VIEWED')
        self.assertEqual(self.set_status(self.app, 'PENDING').status_code, 400)
        self.assertStatus('VIEWED')

    def test_same_status_is_rejected(self):
        self.login(self.owner)
        self.assertEqual(self.set_status(self.app, 'PENDING').status_code, 400)
        self.assertEqual(self.app.events.count(), 1)

    def test_unknown_status_is_rejected(self):
        self.login(self.owner)
        self.assertEqual(self.set_status(self.app, 'ARCHIVED').status_code, 400)
        self.assertEqual(self.patch_json(reverse('application_status', args=[self.app.id]), {}).status_code, 400)

    def test_other_recruiter_is_refused_whatever_the_status(self):
        self.login(self.other)
        for status in ('VIEWED', 'ARCHIVED', 'PENDING'):
            resp = self.set_status(self.app, status)
            self.assertEqual(resp.status_code, 403, status)
        self.assertStatus('PENDING')

    def test_candidate_is_refused(self):
        self.login(self.candidate)
        self.assertEqual(self.set_status(self.app, 'VIEWED').status_code, 403)

    def test_anonymous_is_refused(self):
        self.assertEqual(self.set_status(self.app, 'VIEWED').status_code, 401)

    def test_unknown_application(self):
        self.login(self.owner)
        resp = self.patch_json(reverse('application_status', args=[999999]), {'status': 'VIEWED'})
        self.assertEqual(resp.status_code, 404)

    def test_admin_may_update_any_application(self):
        self.login(make_admin())
        self.assertEqual(self.set_status(self.app, 'SHORTLISTED').status_code, 200)
        self.assertStatus('SHORTLISTED')

    def test_concurrent_change_is_reported(self):
        with mock.patch.object(QuerySet, 'update', return_value=0):
            with self.assertRaises(Conflict):
                lifecycle.update_status(Identity.from_user(self.owner), self.app.id, 'VIEWED')
        self.assertStatus('PENDING')
        self.assertEqual(self.app.events.count(), 1)

    def test_service_checks_ownership_first(self):
        with self.assertRaises(Unauthorized):
            lifecycle.update_status(Identity.from_user(self.other), self.app.id, 'NOT-A-STATUS')


class ApplicationListingTest(ApiTestCase):
    def setUp(self):
        self.owner = make_recruiter('owner@acme.com')
        self.other = make_recruiter('other@globex.com', company='Globex')
        self.ada = make_candidate('ada@example.com', first_name='Ada', last_name='Lovelace')
        self.bob = make_candidate('bob@example.com')
        self.job_a = make_job(self.owner, title='Backend', salary='100k')
        self.job_b = make_job(self.owner, title='Frontend')
        self.foreign = make_job(self.other, title='Elsewhere')
        self.a1 = apply_as(self.ada, self.job_a)
        self.a2 = apply_as(self.ada, self.job_b)
        self.b1 = apply_as(self.bob, self.job_a)
        apply_as(self.bob, self.foreign)
        lifecycle.update_status(Identity.from_user(self.owner), self.a1.id, 'SHORTLISTED')

    def test_candidate_sees_own_applications_with_summary(self):
        self.login(self.ada)
        resp = self.client.get(reverse('applications'), {'mine': 'true'})
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual({a['id'] for a in data['applications']}, {self.a1.id, self.a2.id})
        first = next(a for a in data['applications'] if a['id'] == self.a1.id)
        self.assertEqual(first['job']['company'], 'Acme')
        self.assertEqual(first['job']['salary'], '100k')
        self.assertEqual(data['stats'], {'total': 2, 'pending': 1, 'viewed': 0, 'shortlisted': 1, 'rejected': 0})

    def test_recruiter_sees_only_applications_to_own_jobs(self):
        self.login(self.owner)
        resp = self.client.get(reverse('applications'))
        self.assertEqual(resp.status_code, 200)
        apps = resp.json()['applications']
        self.assertEqual({a['id'] for a in apps}, {self.a1.id, self.a2.id, self.b1.id})
        ada = next(a for a in apps if a['id'] == self.a1.id)
        self.assertEqual(ada['candidate']['first_name'], 'Ada')
        self.assertEqual(ada['candidate']['phone'], '555-0100')
        self.assertEqual(ada['resume_url'], RESUME)

    def test_recruiter_filters(self):
        self.login(self.owner)
        by_job = self.client.get(reverse('applications'), {'job_id': self.job_a.id}).json()['applications']
        self.assertEqual({a['id'] for a in by_job}, {self.a1.id, self.b1.id})
        by_status = self.client.get(reverse('applications'), {'status': 'PENDING'}).json()['applications']
        self.assertEqual({a['id'] for a in by_status}, {self.a2.id, self.b1.id})
        both = self.client.get(reverse('applications'), {'job_id': self.job_a.id, 'status': 'SHORTLISTED'})
        self.assertEqual([a['id'] for a in both.json()['applications']], [self.a1.id])
        self.assertEqual(self.client.get(reverse('applications'), {'status': 'NOPE'}).status_code, 400)

    def test_role_gates(self):
        self.assertEqual(self.client.get(reverse('applications')).status_code, 401)
        self.login(self.ada)
        self.assertEqual(self.client.get(reverse('applications')).status_code, 403)
        self.login(self.owner)
        self.assertEqual(self.client.get(reverse('applications'), {'mine': 'true'}).status_code, 403)

    def test_listing_agrees_with_job_stats(self):
        for recruiter in (self.owner, self.other):
            self.login(recruiter)
            listed = self.client.get(reverse('applications')).json()['applications']
            stats = self.client.get(reverse('recruiter_jobs')).json()
            self.assertEqual(len(listed), sum(j['total_applications'] for j in stats['jobs']))
            self.assertEqual(len(listed), stats['stats']['total_applications'])

    def test_job_stats_break_down_by_status(self):
        jobs, stats = reporting.recruiter_job_stats(self.owner.id)
        backend = next(j for j in jobs if j['id'] == self.job_a.id)
        self.assertEqual((backend['total_applications'], backend['pending'], backend['shortlisted']), (2, 1, 1))
        self.assertEqual(stats, {'total_jobs': 2, 'open_jobs': 2, 'closed_jobs': 0, 'total_applications': 3})


class HistoryAndFeedTest(ApiTestCase):
    def setUp(self):
        self.owner = make_recruiter('owner@acme.com')
        self.other = make_recruiter('other@globex.com', company='Globex')
        self.candidate = make_candidate('ada@example.com')
        self.job = make_job(self.owner)
        self.app = apply_as(self.candidate, self.job)
        apply_as(self.candidate, make_job(self.other, title='Elsewhere'))

    def test_history_visibility(self):
        lifecycle.update_status(Identity.from_user(self.owner), self.app.id, 'VIEWED')
        url = reverse('application_history', args=[self.app.id])
        for user in (self.owner, self.candidate):
            self.login(user)
            events = self.client.get(url).json()['events']
            self.assertEqual([e['to_status'] for e in events], ['PENDING', 'VIEWED'])
            self.assertEqual(events[1]['actor'], 'owner@acme.com')
        self.login(self.other)
        self.assertEqual(self.client.get(url).status_code, 404)

    def test_history_service_hides_foreign_applications(self):
        with self.assertRaises(NotFound):
            lifecycle.history(Identity.from_user(self.other), self.app.id)

    def test_feed_resumes_from_cursor(self):
        self.login(self.owner)
        first = self.client.get(reverse('application_feed')).json()
        self.assertEqual([e['application_id'] for e in first['events']], [self.app.id])

        lifecycle.update_status(Identity.from_user(self.owner), self.app.id, 'VIEWED')
        second = self.client.get(reverse('application_feed'), {'after': first['cursor']}).json()
        self.assertEqual([(e['from_status'], e['to_status']) for e in second['events']], [('PENDING', 'VIEWED')])

        empty = self.client.get(reverse('application_feed'), {'after': second['cursor']}).json()
        self.assertEqual(empty['events'], [])
        self.assertEqual(empty['cursor'], second['cursor'])

    def test_admin_feed_covers_every_job(self):
        self.login(make_admin())
        events = self.client.get(reverse('application_feed')).json()['events']
        self.assertEqual(len(events), 2)

    def test_candidates_have_no_feed(self):
        self.login(self.candidate)
        self.assertEqual(self.client.get(reverse('application_feed')).status_code, 403)


class JobCrudTest(ApiTestCase):
    def setUp(self):
        self.owner = make_recruiter('owner@acme.com')
        self.other = make_recruiter('other@globex.com', company='Globex')
        self.candidate = make_candidate('ada@example.com')

    def test_recruiter_creates_open_job(self):
        self.login(self.owner)
        resp = self.post_json(reverse('jobs'), {
            'title': 'Data Engineer', 'description': 'Pipelines', 'location': 'Berlin',
            'skills': 'python, sql ,', 'job_type': 'FULL_TIME', 'status': 'CLOSED',
        })
        self.assertEqual(resp.status_code, 200)
        job = resp.json()['job']
        self.assertEqual(job['status'], 'OPEN')
        self.assertEqual(job['skills'], ['python', 'sql'])
        self.assertEqual(job['company'], 'Acme')
        self.assertEqual(job['applications_count'], 0)
        self.assertEqual(Job.objects.get(pk=job['id']).recruiter, self.owner)

    def test_create_requires_core_fields(self):
        self.login(self.owner)
        resp = self.post_json(reverse('jobs'), {'title': 'No description'})
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(Job.objects.exists())

    def test_only_recruiters_create(self):
        payload = {'title': 'T', 'description': 'D', 'location': 'L'}
        self.assertEqual(self.post_json(reverse('jobs'), payload).status_code, 401)
        self.login(self.candidate)
        self.assertEqual(self.post_json(reverse('jobs'), payload).status_code, 403)

    def test_partial_update_by_owner(self):
        job = make_job(self.owner, salary='90k')
        self.login(self.owner)
        resp = self.patch_json(reverse('job_detail', args=[job.id]), {'title': 'Senior Backend Engineer'})
        self.assertEqual(resp.status_code, 200)
        job.refresh_from_db()
        self.assertEqual(job.title, 'Senior Backend Engineer')
        self.assertEqual(job.description, 'Build and run APIs')
        self.assertEqual(job.salary, '90k')

    def test_update_rejects_unknown_status(self):
        job = make_job(self.owner)
        self.login(self.owner)
        resp = self.patch_json(reverse('job_detail', args=[job.id]), {'status': 'PAUSED'})
        self.assertEqual(resp.status_code, 400)

    def test_non_owner_cannot_touch_job(self):
        job = make_job(self.owner)
        self.login(self.other)
        self.assertEqual(self.patch_json(reverse('job_detail', args=[job.id]), {'title': 'x'}).status_code, 403)
        self.assertEqual(self.client.post(reverse('job_close', args=[job.id])).status_code, 403)
        self.assertEqual(self.client.delete(reverse('job_detail', args=[job.id])).status_code, 403)
        self.assertTrue(Job.objects.filter(pk=job.id, status='OPEN').exists())

    def test_admin_can_edit_any_job(self):
        job = make_job(self.owner)
        self.login(make_admin())
        self.assertEqual(self.patch_json(reverse('job_detail', args=[job.id]), {'status': 'CLOSED'}).status_code, 200)
        job.refresh_from_db()
        self.assertEqual(job.status, 'CLOSED')

    def test_missing_job(self):
        self.login(self.owner)
        self.assertEqual(self.client.get(reverse('job_detail', args=[999999])).status_code, 404)
        self.assertEqual(self.client.delete(reverse('job_detail', args=[999999])).status_code, 404)

    def test_delete_removes_applications(self):
        job = make_job(self.owner)
        apply_as(self.candidate, job)
        self.login(self.owner)
        self.assertEqual(self.client.delete(reverse('job_detail', args=[job.id])).status_code, 200)
        self.assertEqual(self.client.get(reverse('job_detail', args=[job.id])).status_code, 404)
        self.assertFalse(Application.objects.exists())
        self.assertFalse(ApplicationEvent.objects.exists())

    def test_has_applied(self):
        job = make_job(self.owner)
        url = reverse('job_detail', args=[job.id])
        self.assertFalse(self.client.get(url).json()['job']['has_applied'])
        self.login(self.candidate)
        self.assertFalse(self.client.get(url).json()['job']['has_applied'])
        apply_as(self.candidate, job)
        detail = self.client.get(url).json()['job']
        self.assertTrue(detail['has_applied'])
        self.assertEqual(detail['applications_count'], 1)
        self.assertEqual(detail['company_email'], 'jobs@acme.com')


class JobListTest(ApiTestCase):
    def setUp(self):
        self.acme = make_recruiter('owner@acme.com')
        self.globex = make_recruiter('hr@globex.com', company='Globex')
        now = timezone.now()
        self.python = make_job(self.acme, title='Python Developer', location='Berlin, DE', job_type='FULL_TIME')
        self.data = make_job(self.acme, title='Data Analyst', description='SQL and python reporting',
                             location='Remote', job_type='CONTRACT')
        self.design = make_job(self.globex, title='Designer', description='Figma', location='berlin')
        self.closed = make_job(self.globex, title='Old Python role', status='CLOSED')
        for offset, job in enumerate([self.python, self.data, self.design, self.closed]):
            Job.objects.filter(pk=job.pk).update(created_at=now - datetime.timedelta(hours=offset))

    def ids(self, **params):
        resp = self.client.get(reverse('jobs'), params)
        self.assertEqual(resp.status_code, 200)
        return [j['id'] for j in resp.json()['jobs']]

    def test_defaults_to_open_jobs_newest_first(self):
        self.assertEqual(self.ids(), [self.python.id, self.data.id, self.design.id])

    def test_status_filter(self):
        self.assertEqual(self.ids(status='CLOSED'), [self.closed.id])

    def test_search_matches_title_or_description(self):
        self.assertEqual(self.ids(search='python'), [self.python.id, self.data.id])

    def test_location_is_a_case_insensitive_substring(self):
        self.assertEqual(self.ids(location='BERLIN'), [self.python.id, self.design.id])

    def test_job_type_is_exact(self):
        self.assertEqual(self.ids(job_type='CONTRACT'), [self.data.id])
        self.assertEqual(self.ids(job_type='CONTR'), [])

    def test_pagination(self):
        resp = self.client.get(reverse('jobs'), {'page': 2, 'limit': 2}).json()
        self.assertEqual([j['id'] for j in resp['jobs']], [self.design.id])
        self.assertEqual(resp['pagination'], {'page': 2, 'limit': 2, 'total': 3, 'pages': 2})
        self.assertEqual(self.ids(page=5, limit=2), [])

    def test_bad_page_keeps_a_good_limit(self):
        resp = self.client.get(reverse('jobs'), {'page': 'abc', 'limit': 2}).json()
        self.assertEqual(resp['pagination'], {'page': 1, 'limit': 2, 'total': 3, 'pages': 2})
        self.assertEqual([j['id'] for j in resp['jobs']], [self.python.id, self.data.id])

        resp = self.client.get(reverse('jobs'), {'page': 2, 'limit': 'lots'}).json()
        self.assertEqual(resp['pagination']['page'], 2)
        self.assertEqual(resp['pagination']['limit'], 12)

    def test_rows_carry_company_and_application_count(self):
        apply_as(make_candidate('ada@example.com'), self.design)
        jobs = self.client.get(reverse('jobs')).json()['jobs']
        design = next(j for j in jobs if j['id'] == self.design.id)
        self.assertEqual(design['company'], 'Globex')
        self.assertEqual(design['applications_count'], 1)

    def test_company_falls_back_when_profile_missing(self):
        RecruiterProfile.objects.filter(user=self.globex).delete()
        jobs = self.client.get(reverse('jobs')).json()['jobs']
        design = next(j for j in jobs if j['id'] == self.design.id)
        self.assertEqual(design['company'], 'Unknown Company')
