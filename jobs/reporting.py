"""
Read-side counts for dashboards.

Everything is counted from current rows on every call; nothing is cached or
maintained incrementally, so cost grows with table size.
"""
from django.contrib.auth import get_user_model
from django.db.models import Count, Q

from .models import Application, Job
from .lifecycle import STATUSES

User = get_user_model()

RECENT_LIMIT = 5


def _status_counts(queryset):
    """Per-status counts over ``queryset`` keyed by lowercase status."""
    return queryset.aggregate(**{
        status.lower(): Count('pk', filter=Q(status=status))
        for status in STATUSES
    })


def candidate_status_summary(candidate_id):
    qs = Application.objects.filter(candidate_id=candidate_id)
    summary = {'total': qs.count()}
    summary.update(_status_counts(qs))
    return summary


def recruiter_job_stats(recruiter_id):
    """
    The recruiter's jobs, newest first, each with application counts by
    status, plus totals across all of them.
    """
    annotations = {
        status.lower(): Count('applications', filter=Q(applications__status=status))
        for status in STATUSES
    }
    jobs = (
        Job.objects
        .filter(recruiter_id=recruiter_id)
        .annotate(total_applications=Count('applications'), **annotations)
        .order_by('-created_at')
    )
    rows = []
    for job in jobs:
        row = {
            'id': job.id,
            'title': job.title,
            'location': job.location,
            'status': job.status,
            'created_at': job.created_at,
            'total_applications': job.total_applications,
        }
        for status in STATUSES:
            row[status.lower()] = getattr(job, status.lower())
        rows.append(row)

    stats = {
        'total_jobs': len(rows),
        'open_jobs': sum(1 for r in rows if r['status'] == Job.STATUS_OPEN),
        'closed_jobs': sum(1 for r in rows if r['status'] == Job.STATUS_CLOSED),
        'total_applications': sum(r['total_applications'] for r in rows),
    }
    return rows, stats


def platform_overview():
    users = User.objects.aggregate(
        total_users=Count('pk'),
        total_candidates=Count('pk', filter=Q(role=User.ROLE_CANDIDATE)),
        total_recruiters=Count('pk', filter=Q(role=User.ROLE_RECRUITER)),
    )
    jobs = Job.objects.aggregate(
        total_jobs=Count('pk'),
        open_jobs=Count('pk', filter=Q(status=Job.STATUS_OPEN)),
        closed_jobs=Count('pk', filter=Q(status=Job.STATUS_CLOSED)),
    )
    application_status = {
        status: Application.objects.filter(status=status).count()
        for status in STATUSES
    }

    stats = dict(users)
    stats.update(jobs)
    stats['total_applications'] = Application.objects.count()
    stats['application_status'] = application_status

    recent_users = [
        {'id': u.id, 'email': u.email, 'role': u.role, 'created_at': u.date_joined}
        for u in User.objects.order_by('-date_joined')[:RECENT_LIMIT]
    ]
    recent_jobs = [
        {
            'id': job.id,
            'title': job.title,
            'status': job.status,
            'created_at': job.created_at,
            'company': job.company_name or 'Unknown',
            'applications_count': job.applications_count,
        }
        for job in (
            Job.objects
            .select_related('recruiter__recruiter_profile')
            .annotate(applications_count=Count('applications'))
            .order_by('-created_at')[:RECENT_LIMIT]
        )
    ]
    return {'stats': stats, 'recent_users': recent_users, 'recent_jobs': recent_jobs}
