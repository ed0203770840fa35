# accounts/models.py
from django.contrib.auth.models import AbstractUser, UserManager as BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault('role', User.ROLE_ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class User(AbstractUser):
    ROLE_CANDIDATE = 'CANDIDATE'
    ROLE_RECRUITER = 'RECRUITER'
    ROLE_ADMIN = 'ADMIN'
    ROLE_CHOICES = [
        (ROLE_CANDIDATE, 'Candidate'),
        (ROLE_RECRUITER, 'Recruiter'),
        (ROLE_ADMIN, 'Admin'),
    ]
    # roles a visitor may pick for themselves at registration
    SELF_SERVICE_ROLES = (ROLE_CANDIDATE, ROLE_RECRUITER)

    email = models.EmailField('email address', unique=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CANDIDATE, editable=False)

    objects = UserManager()

    class Meta:
        ordering = ['-date_joined']

    def is_candidate(self):
        return self.role == self.ROLE_CANDIDATE

    def is_recruiter(self):
        return self.role == self.ROLE_RECRUITER

    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    @property
    def profile(self):
        """The role profile row, or None for admins and half-created users."""
        attr = {
            self.ROLE_CANDIDATE: 'candidate_profile',
            self.ROLE_RECRUITER: 'recruiter_profile',
        }.get(self.role)
        if attr is None:
            return None
        try:
            return getattr(self, attr)
        except (CandidateProfile.DoesNotExist, RecruiterProfile.DoesNotExist):
            return None


class CandidateProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='candidate_profile')
    phone = models.CharField(max_length=32, blank=True, null=True)
    photo_url = models.URLField(max_length=500, blank=True, null=True)
    resume_url = models.URLField(max_length=500, blank=True, null=True)
    bio = models.TextField(blank=True, null=True)
    portfolio_url = models.URLField(max_length=500, blank=True, null=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Candidate profile of {self.user.email}"

    def can_apply(self):
        return bool(self.resume_url)


class RecruiterProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='recruiter_profile')
    company_name = models.CharField(max_length=255)
    company_email = models.EmailField()
    description = models.TextField(blank=True, null=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.company_name} ({self.user.email})"
