# accounts/forms.py
from django import forms
from django.conf import settings
from django.contrib.auth import password_validation
from django.core.exceptions import ValidationError

from hirenest.forms import PartialModelForm
from .models import User, CandidateProfile, RecruiterProfile


DUPLICATE_EMAIL = "User with this email already exists"


class RegistrationForm(forms.Form):
    email = forms.EmailField()
    password = forms.CharField(strip=False)
    role = forms.ChoiceField(choices=[(r, r.title()) for r in User.SELF_SERVICE_ROLES])
    first_name = forms.CharField(required=False, max_length=150)
    last_name = forms.CharField(required=False, max_length=150)
    # candidate
    phone = forms.CharField(required=False, max_length=32)
    # recruiter
    company_name = forms.CharField(required=False, max_length=255)
    company_email = forms.EmailField(required=False)
    description = forms.CharField(required=False)

    def clean_email(self):
        email = self.cleaned_data['email'].strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise ValidationError(DUPLICATE_EMAIL)
        return email

    def clean(self):
        cleaned = super().clean()
        role = cleaned.get('role')
        if role == User.ROLE_RECRUITER and not (cleaned.get('company_name') and cleaned.get('company_email')):
            raise ValidationError("Company name and email required for recruiters")

        password = cleaned.get('password')
        if password and cleaned.get('email'):
            probe = User(username=cleaned['email'], email=cleaned['email'],
                         first_name=cleaned.get('first_name', ''), last_name=cleaned.get('last_name', ''))
            try:
                password_validation.validate_password(password, user=probe)
            except ValidationError as exc:
                self.add_error('password', exc)
        return cleaned


class LoginForm(forms.Form):
    email = forms.EmailField()
    password = forms.CharField(strip=False)


class CandidateProfileForm(PartialModelForm):
    class Meta:
        model = CandidateProfile
        fields = ['phone', 'bio', 'portfolio_url']


class RecruiterProfileForm(PartialModelForm):
    class Meta:
        model = RecruiterProfile
        fields = ['company_name', 'company_email', 'description']


class NameForm(PartialModelForm):
    class Meta:
        model = User
        fields = ['first_name', 'last_name']


class AssetUploadForm(forms.Form):
    file = forms.FileField()
    type = forms.ChoiceField(choices=[(k, k) for k in settings.ASSET_UPLOAD_RULES])

    def clean(self):
        cleaned = super().clean()
        upload = cleaned.get('file')
        kind = cleaned.get('type')
        if not upload or not kind:
            return cleaned
        rules = settings.ASSET_UPLOAD_RULES[kind]
        if upload.content_type not in rules['content_types']:
            if kind == 'photo':
                raise ValidationError("Invalid image type. Only JPEG, PNG, and WebP are allowed.")
            raise ValidationError("Only PDF files are allowed for resumes")
        if upload.size > rules['max_bytes']:
            limit_mb = rules['max_bytes'] // (1024 * 1024)
            label = 'Image' if kind == 'photo' else 'Resume'
            raise ValidationError(f"{label} must be less than {limit_mb}MB")
        return cleaned
