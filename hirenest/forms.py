from django import forms
from django.forms.models import model_to_dict


class PartialModelForm(forms.ModelForm):
    """A ModelForm for PATCH: fields missing from ``data`` keep the instance's values."""

    def __init__(self, data=None, *args, **kwargs):
        instance = kwargs.get('instance')
        if data is not None and instance is not None and instance.pk:
            merged = model_to_dict(instance, fields=self._meta.fields)
            merged.update({k: v for k, v in data.items() if k in self._meta.fields})
            data = merged
        super().__init__(data, *args, **kwargs)
