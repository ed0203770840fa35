# jobs/views.py
import logging

from django.conf import settings
from django.db.models import Count, Q
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from accounts.decorators import identity_required, role_required
from accounts.models import User
from hirenest.errors import NotFound, Unauthorized, ValidationFailed, form_error_message
from hirenest.http import page_params, paginate, read_json

from . import lifecycle, reporting
from .forms import ApplyForm, CreateJobForm, JobForm
from .models import Application, Job

logger = logging.getLogger(__name__)

UNKNOWN_COMPANY = 'Unknown Company'


# -------------------------
# Serialisation helpers
# -------------------------
def _job_summary(job):
    return {
        'id': job.id,
        'title': job.title,
        'description': job.description,
        'location': job.location,
        'salary': job.salary,
        'job_type': job.job_type,
        'experience': job.experience,
        'skills': job.skills,
        'status': job.status,
        'created_at': job.created_at,
        'company': job.company_name or UNKNOWN_COMPANY,
        'applications_count': job.applications_count,
    }


def _job_detail(job, has_applied=False):
    data = _job_summary(job)
    profile = getattr(job.recruiter, 'recruiter_profile', None)
    data.update({
        'updated_at': job.updated_at,
        'recruiter_id': job.recruiter_id,
        'company_email': profile.company_email if profile else None,
        'company_description': profile.description if profile else None,
        'has_applied': has_applied,
    })
    return data


def _candidate_application(app):
    job = app.job
    return {
        'id': app.id,
        'status': app.status,
        'applied_at': app.applied_at,
        'cover_letter': app.cover_letter,
        'resume_url': app.resume_url,
        'job': {
            'id': job.id,
            'title': job.title,
            'location': job.location,
            'salary': job.salary,
            'job_type': job.job_type,
            'status': job.status,
            'company': job.company_name or 'Unknown',
        },
    }


def _recruiter_application(app):
    candidate = app.candidate
    profile = getattr(candidate, 'candidate_profile', None)
    return {
        'id': app.id,
        'status': app.status,
        'applied_at': app.applied_at,
        'resume_url': app.resume_url,
        'cover_letter': app.cover_letter,
        'job': {'id': app.job.id, 'title': app.job.title, 'location': app.job.location},
        'candidate': {
            'id': candidate.id,
            'email': candidate.email,
            'first_name': candidate.first_name or None,
            'last_name': candidate.last_name or None,
            'phone': profile.phone if profile else None,
            'photo_url': profile.photo_url if profile else None,
        },
    }


def _event(event):
    return {
        'id': event.id,
        'application_id': event.application_id,
        'job_id': event.application.job_id,
        'from_status': event.from_status or None,
        'to_status': event.to_status,
        'actor': event.actor_label,
        'created_at': event.created_at,
    }


def _jobs_queryset():
    return (
        Job.objects
        .select_related('recruiter', 'recruiter__recruiter_profile')
        .annotate(applications_count=Count('applications'))
    )


def _load_job(job_id):
    job = _jobs_queryset().filter(pk=job_id).first()
    if job is None:
        raise NotFound("Job not found")
    return job


def _load_managed_job(request, job_id):
    job = _load_job(job_id)
    if not job.is_managed_by(request.identity):
        raise Unauthorized("Only the recruiter who posted this job can change it.")
    return job


# -------------------------
# Jobs
# -------------------------
@require_http_methods(["GET", "POST"])
def jobs_collection(request):
    if request.method == 'POST':
        return create_job(request)
    return list_jobs(request)


def list_jobs(request):
    search = request.GET.get('search', '').strip()
    location = request.GET.get('location', '').strip()
    job_type = request.GET.get('job_type', '').strip()
    status = request.GET.get('status', '').strip() or Job.STATUS_OPEN
    page, limit = page_params(request, settings.JOBS_PAGE_SIZE)

    qs = _jobs_queryset().filter(status=status).order_by('-created_at')
    if search:
        qs = qs.filter(Q(title__icontains=search) | Q(description__icontains=search))
    if location:
        qs = qs.filter(location__icontains=location)
    if job_type:
        qs = qs.filter(job_type=job_type)

    jobs, pagination = paginate(qs, page, limit)
    return JsonResponse({'jobs': [_job_summary(j) for j in jobs], 'pagination': pagination})


@role_required(User.ROLE_RECRUITER, message="Only recruiters can post jobs.")
def create_job(request):
    form = CreateJobForm(read_json(request))
    if not form.is_valid():
        raise ValidationFailed(form_error_message(form))
    job = form.save(commit=False)
    job.recruiter = request.identity.user
    job.status = Job.STATUS_OPEN
    job.save()
    logger.info("Job %s posted by recruiter %s", job.id, job.recruiter_id)
    return JsonResponse({'message': "Job created successfully", 'job': _job_detail(_load_job(job.id))})


@require_http_methods(["GET", "PATCH", "DELETE"])
def job_detail(request, job_id):
    if request.method == 'PATCH':
        return update_job(request, job_id)
    if request.method == 'DELETE':
        return delete_job(request, job_id)

    job = _load_job(job_id)
    identity = request.identity
    has_applied = False
    if identity is not None and identity.is_candidate:
        has_applied = Application.objects.filter(job=job, candidate_id=identity.user_id).exists()
    return JsonResponse({'job': _job_detail(job, has_applied)})


@identity_required
def update_job(request, job_id):
    job = _load_managed_job(request, job_id)
    form = JobForm(read_json(request), instance=job)
    if not form.is_valid():
        raise ValidationFailed(form_error_message(form))
    form.save()
    logger.info("Job %s updated by %s", job.id, request.identity.label)
    return JsonResponse({'message': "Job updated successfully", 'job': _job_detail(_load_job(job.id))})


@identity_required
def delete_job(request, job_id):
    job = _load_managed_job(request, job_id)
    job.delete()
    logger.info("Job %s deleted by %s", job_id, request.identity.label)
    return JsonResponse({'message': "Job deleted successfully"})


@require_http_methods(["POST"])
@identity_required
def close_job(request, job_id):
    job = _load_managed_job(request, job_id)
    if job.status != Job.STATUS_CLOSED:
        job.status = Job.STATUS_CLOSED
        job.save(update_fields=['status', 'updated_at'])
        logger.info("Job %s closed by %s", job.id, request.identity.label)
    return JsonResponse({'message': "Job closed", 'job': _job_detail(_load_job(job.id))})


@require_http_methods(["GET"])
@role_required(User.ROLE_RECRUITER, message="Only recruiters can access this")
def recruiter_jobs(request):
    jobs, stats = reporting.recruiter_job_stats(request.identity.user_id)
    return JsonResponse({'jobs': jobs, 'stats': stats})


# -------------------------
# Applications
# -------------------------
@require_http_methods(["GET", "POST"])
def applications_collection(request):
    if request.method == 'POST':
        return apply(request)
    if request.GET.get('mine', '').lower() in ('1', 'true', 'yes'):
        return candidate_applications(request)
    return recruiter_applications(request)


@role_required(User.ROLE_CANDIDATE, message="Only candidates can apply for jobs")
def apply(request):
    # role and resume come before anything in the body
    lifecycle.require_resume(request.identity)
    payload = read_json(request)
    form = ApplyForm(payload)
    if not form.is_valid():
        raise ValidationFailed(form_error_message(form))
    application = lifecycle.apply_to_job(
        request.identity,
        payload.get('job_id'),
        cover_letter=form.cleaned_data.get('cover_letter'),
    )
    return JsonResponse({
        'message': "Application submitted successfully",
        'application': {
            'id': application.id,
            'job_id': application.job_id,
            'candidate_id': application.candidate_id,
            'resume_url': application.resume_url,
            'cover_letter': application.cover_letter,
            'status': application.status,
            'applied_at': application.applied_at,
        },
    })


@role_required(User.ROLE_CANDIDATE, message="Only candidates can access this")
def candidate_applications(request):
    candidate_id = request.identity.user_id
    apps = lifecycle.applications_for_candidate(candidate_id)
    return JsonResponse({
        'applications': [_candidate_application(a) for a in apps],
        'stats': reporting.candidate_status_summary(candidate_id),
    })


@role_required(User.ROLE_RECRUITER, message="Only recruiters can access this")
def recruiter_applications(request):
    apps = lifecycle.applications_for_recruiter(
        request.identity.user_id,
        job_id=request.GET.get('job_id'),
        status=request.GET.get('status'),
    )
    return JsonResponse({'applications': [_recruiter_application(a) for a in apps]})


@require_http_methods(["PATCH"])
@identity_required
def application_status(request, app_id):
    payload = read_json(request)
    application = lifecycle.update_status(request.identity, app_id, payload.get('status'))
    return JsonResponse({
        'message': "Status updated successfully",
        'application': {'id': application.id, 'status': application.status},
    })


@require_http_methods(["GET"])
@identity_required
def application_history(request, app_id):
    application, events = lifecycle.history(request.identity, app_id)
    return JsonResponse({
        'application': {'id': application.id, 'status': application.status},
        'events': [_event(e) for e in events],
    })


@require_http_methods(["GET"])
@role_required(User.ROLE_RECRUITER, User.ROLE_ADMIN)
def application_feed(request):
    try:
        after = max(int(request.GET.get('after', 0)), 0)
        limit = int(request.GET.get('limit', settings.FEED_PAGE_SIZE))
    except ValueError:
        raise ValidationFailed("after and limit must be integers")
    limit = min(max(limit, 1), settings.MAX_PAGE_SIZE)
    events = lifecycle.change_feed(request.identity, after=after, limit=limit)
    cursor = events[-1].id if events else after
    return JsonResponse({'events': [_event(e) for e in events], 'cursor': cursor})
