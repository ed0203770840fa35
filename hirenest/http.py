import json

from django.conf import settings
from django.core.paginator import EmptyPage, Paginator

from .errors import ValidationFailed


def read_json(request):
    """Decode a JSON object body; an empty body reads as {}."""
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body.decode('utf-8'))
    except (UnicodeDecodeError, ValueError):
        raise ValidationFailed("Invalid JSON")
    if not isinstance(payload, dict):
        raise ValidationFailed("JSON body must be an object.")
    return payload


def _int_param(request, name, default):
    try:
        return int(request.GET.get(name, default))
    except ValueError:
        return default


def page_params(request, default_limit):
    """``(page, limit)`` from the query string; a malformed value falls back on its own."""
    page = max(_int_param(request, 'page', 1), 1)
    limit = _int_param(request, 'limit', default_limit)
    limit = min(max(limit, 1), settings.MAX_PAGE_SIZE)
    return page, limit


def paginate(queryset, page, limit):
    """
    Return ``(items, pagination)``. A page past the end yields no items
    rather than clamping to the last page.
    """
    paginator = Paginator(queryset, limit)
    try:
        items = list(paginator.page(page).object_list)
    except EmptyPage:
        items = []
    total = paginator.count
    pagination = {
        'page': page,
        'limit': limit,
        'total': total,
        'pages': (total + limit - 1) // limit,
    }
    return items, pagination
