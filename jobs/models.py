# jobs/models.py
from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django.db import models
from django.utils import timezone


class Job(models.Model):
    STATUS_OPEN = 'OPEN'
    STATUS_CLOSED = 'CLOSED'
    STATUS_CHOICES = (
        (STATUS_OPEN, 'Open'),
        (STATUS_CLOSED, 'Closed'),
    )

    recruiter = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='posted_jobs')
    title = models.CharField(max_length=255)
    description = models.TextField()
    location = models.CharField(max_length=255)
    salary = models.CharField(max_length=100, blank=True, null=True)
    job_type = models.CharField(max_length=50, blank=True, null=True)
    experience = models.CharField(max_length=100, blank=True, null=True)
    skills = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_OPEN, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} ({self.status})"

    def is_open(self):
        return self.status == self.STATUS_OPEN

    def is_managed_by(self, identity):
        return identity.is_admin or self.recruiter_id == identity.user_id

    @property
    def company_name(self):
        try:
            return self.recruiter.recruiter_profile.company_name
        except ObjectDoesNotExist:
            return None


APPLICATION_STATUS = (
    ('PENDING', 'Pending'),
    ('VIEWED', 'Viewed'),
    ('SHORTLISTED', 'Shortlisted'),
    ('REJECTED', 'Rejected'),
)


class Application(models.Model):
    STATUS_PENDING = 'PENDING'
    STATUS_VIEWED = 'VIEWED'
    STATUS_SHORTLISTED = 'SHORTLISTED'
    STATUS_REJECTED = 'REJECTED'

    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='applications')
    candidate = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='applications')
    # copied from the candidate profile when the application is made
    resume_url = models.URLField(max_length=500)
    cover_letter = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=APPLICATION_STATUS, default=STATUS_PENDING, db_index=True)
    applied_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-applied_at']
        constraints = [
            models.UniqueConstraint(fields=['job', 'candidate'], name='unique_application_per_job_candidate'),
        ]

    def __str__(self):
        return f"{self.candidate.email} -> {self.job.title} ({self.status})"


class ApplicationEvent(models.Model):
    """
    Append-only status log. One row when an application is created
    (from_status is blank) and one per status change.
    """
    application = models.ForeignKey(Application, on_delete=models.CASCADE, related_name='events')
    from_status = models.CharField(max_length=20, choices=APPLICATION_STATUS, blank=True)
    to_status = models.CharField(max_length=20, choices=APPLICATION_STATUS)
    actor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    actor_label = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"#{self.application_id}: {self.from_status or '-'} -> {self.to_status}"
