# jobs/forms.py
from django import forms
from django.core.exceptions import ValidationError

from hirenest.forms import PartialModelForm

from .models import Job


class SkillsField(forms.Field):
    """Accepts a JSON list of strings or a comma separated string."""

    def to_python(self, value):
        if value in (None, ''):
            return []
        if isinstance(value, str):
            items = value.split(',')
        elif isinstance(value, (list, tuple)):
            items = value
        else:
            raise ValidationError("Skills must be a list or a comma separated string.")
        return [str(s).strip() for s in items if str(s).strip()]


class JobForm(PartialModelForm):
    skills = SkillsField(required=False)

    class Meta:
        model = Job
        fields = ['title', 'description', 'location', 'salary', 'job_type', 'experience', 'skills', 'status']

    def clean(self):
        cleaned = super().clean()
        for name in ('salary', 'job_type', 'experience'):
            if cleaned.get(name) == '':
                cleaned[name] = None
        return cleaned


class CreateJobForm(JobForm):
    """New postings always start OPEN."""

    class Meta(JobForm.Meta):
        fields = ['title', 'description', 'location', 'salary', 'job_type', 'experience', 'skills']


class ApplyForm(forms.Form):
    # job_id is checked by jobs.lifecycle.apply_to_job, after the resume check
    cover_letter = forms.CharField(required=False, max_length=5000)
