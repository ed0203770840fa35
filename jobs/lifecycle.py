"""
Application lifecycle: who may apply, who may move an application along,
and which status moves are legal.

    PENDING -> VIEWED | SHORTLISTED | REJECTED
    VIEWED  -> SHORTLISTED | REJECTED

SHORTLISTED and REJECTED are terminal. Every successful create or move
appends an ``ApplicationEvent``.
"""
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from hirenest.errors import Conflict, NotFound, Unauthorized, ValidationFailed

from .models import Application, ApplicationEvent, Job

logger = logging.getLogger(__name__)

STATUSES = (
    Application.STATUS_PENDING,
    Application.STATUS_VIEWED,
    Application.STATUS_SHORTLISTED,
    Application.STATUS_REJECTED,
)

TRANSITIONS = {
    Application.STATUS_PENDING: frozenset({
        Application.STATUS_VIEWED,
        Application.STATUS_SHORTLISTED,
        Application.STATUS_REJECTED,
    }),
    Application.STATUS_VIEWED: frozenset({
        Application.STATUS_SHORTLISTED,
        Application.STATUS_REJECTED,
    }),
    Application.STATUS_SHORTLISTED: frozenset(),
    Application.STATUS_REJECTED: frozenset(),
}

ALREADY_APPLIED = "You have already applied for this job"


def is_terminal(status):
    return not TRANSITIONS.get(status)


def can_transition(current, target):
    return target in TRANSITIONS.get(current, ())


def check_transition(current, target):
    if target not in STATUSES:
        raise ValidationFailed("Invalid status")
    if target == current:
        raise ValidationFailed(f"Application is already {current}.")
    if is_terminal(current):
        raise ValidationFailed(f"Application is {current} and can no longer change status.")
    if not can_transition(current, target):
        raise ValidationFailed(f"Cannot move an application from {current} back to {target}.")


def _coerce_id(value, label):
    """Accept an int or a string of digits; bools and floats are not ids."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationFailed(f"{label} is required")
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValidationFailed(f"{label} must be an integer")


def _record(application, from_status, to_status, identity):
    return ApplicationEvent.objects.create(
        application=application,
        from_status=from_status,
        to_status=to_status,
        actor=identity.user,
        actor_label=identity.email or identity.label,
    )


def require_resume(identity):
    """The caller's candidate profile, provided they may apply at all."""
    if not identity.is_candidate:
        raise Unauthorized("Only candidates can apply for jobs")
    profile = identity.user.profile
    if profile is None or not profile.can_apply():
        raise ValidationFailed(
            "You must upload a resume before applying. Go to your dashboard to upload your resume."
        )
    return profile


def apply_to_job(identity, job_id, cover_letter=None):
    """
    Create a PENDING application for the calling candidate.

    Checks run in a fixed order so each failure is distinguishable: role,
    resume on file, job id given, job exists, job open, not already applied.
    The (job, candidate) unique constraint backs up the last check when two
    requests race.
    """
    profile = require_resume(identity)

    job_id = _coerce_id(job_id, "Job ID")
    job = Job.objects.filter(pk=job_id).first()
    if job is None:
        raise NotFound("Job not found")
    if not job.is_open():
        raise ValidationFailed("This job is no longer accepting applications")

    if Application.objects.filter(job=job, candidate_id=identity.user_id).exists():
        raise Conflict(ALREADY_APPLIED)

    try:
        with transaction.atomic():
            application = Application.objects.create(
                job=job,
                candidate=identity.user,
                resume_url=profile.resume_url,
                cover_letter=cover_letter or None,
                status=Application.STATUS_PENDING,
                applied_at=timezone.now(),
            )
            _record(application, '', Application.STATUS_PENDING, identity)
    except IntegrityError:
        logger.info("Duplicate application blocked by constraint: job=%s candidate=%s", job.id, identity.user_id)
        raise Conflict(ALREADY_APPLIED)

    logger.info("Application %s created: job=%s candidate=%s", application.id, job.id, identity.user_id)
    return application


def update_status(identity, application_id, new_status):
    """
    Move an application to ``new_status`` on behalf of the job's recruiter
    or an admin.

    Ownership is checked before the requested status is looked at. The write
    only lands if the status is still the one that was validated; otherwise
    the caller gets a Conflict and should reload.
    """
    if not (identity.is_recruiter or identity.is_admin):
        raise Unauthorized("Only recruiters can update application status")

    application_id = _coerce_id(application_id, "Application ID")
    application = Application.objects.select_related('job').filter(pk=application_id).first()
    if application is None:
        raise NotFound("Application not found")
    if not application.job.is_managed_by(identity):
        raise Unauthorized("You can only update applications to your own jobs")

    current = application.status
    check_transition(current, new_status)

    with transaction.atomic():
        updated = Application.objects.filter(pk=application.pk, status=current).update(status=new_status)
        if not updated:
            raise Conflict("Application status changed concurrently; reload and try again.")
        _record(application, current, new_status, identity)

    application.status = new_status
    logger.info("Application %s moved %s -> %s by %s", application.id, current, new_status, identity.label)
    return application


def can_view(identity, application):
    return (
        identity.is_admin
        or application.candidate_id == identity.user_id
        or application.job.recruiter_id == identity.user_id
    )


def history(identity, application_id):
    application_id = _coerce_id(application_id, "Application ID")
    application = Application.objects.select_related('job').filter(pk=application_id).first()
    if application is None or not can_view(identity, application):
        raise NotFound("Application not found")
    return application, list(application.events.all())


def applications_for_candidate(candidate_id):
    return (
        Application.objects
        .filter(candidate_id=candidate_id)
        .select_related('job', 'job__recruiter__recruiter_profile')
        .order_by('-applied_at')
    )


def applications_for_recruiter(recruiter_id, job_id=None, status=None):
    qs = (
        Application.objects
        .filter(job__recruiter_id=recruiter_id)
        .select_related('job', 'candidate', 'candidate__candidate_profile')
        .order_by('-applied_at')
    )
    if job_id not in (None, ''):
        qs = qs.filter(job_id=_coerce_id(job_id, "Job ID"))
    if status not in (None, ''):
        if status not in STATUSES:
            raise ValidationFailed("Invalid status")
        qs = qs.filter(status=status)
    return qs


def change_feed(identity, after=0, limit=50):
    """
    Status events on the caller's jobs (every job for admins) with id greater
    than ``after``, oldest first. Pass the last id back as ``after`` to resume.
    """
    qs = ApplicationEvent.objects.select_related('application', 'application__job')
    if not identity.is_admin:
        qs = qs.filter(application__job__recruiter_id=identity.user_id)
    return list(qs.filter(id__gt=after).order_by('id')[:limit])
