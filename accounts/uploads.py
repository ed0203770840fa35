# accounts/uploads.py
import logging
import os
import time

from django.conf import settings
from django.core.files.storage import default_storage

from hirenest.errors import Upstream

logger = logging.getLogger(__name__)


def asset_key(user_id, kind, filename):
    """Storage key: ``<folder>/<user id>-<epoch millis>.<ext>``."""
    folder = settings.ASSET_UPLOAD_RULES[kind]['folder']
    ext = os.path.splitext(filename or '')[1].lower().lstrip('.') or 'bin'
    return f"{folder}/{user_id}-{int(time.time() * 1000)}.{ext}"


def store_asset(request, profile, kind, upload):
    """
    Write ``upload`` to the blob store and, only once that succeeded, record
    its public URL on the candidate profile. Returns the URL.
    """
    key = asset_key(profile.user_id, kind, upload.name)
    try:
        name = default_storage.save(key, upload)
        url = request.build_absolute_uri(default_storage.url(name))
    except Exception as exc:
        logger.exception("Storing %s for user %s failed", kind, profile.user_id)
        raise Upstream("Failed to upload file") from exc

    field = settings.ASSET_UPLOAD_RULES[kind]['profile_field']
    setattr(profile, field, url)
    profile.save(update_fields=[field, 'updated_at'])
    logger.info("Stored %s for user %s at %s", kind, profile.user_id, name)
    return url
