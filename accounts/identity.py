# accounts/identity.py
import logging

from django.conf import settings
from django.core import signing

from .models import User

logger = logging.getLogger(__name__)

OPERATOR_SALT = 'hirenest.operator'


class Identity:
    """
    The caller of a request: a stored user reached through the session, or an
    operator admitted with a signed operator token (no User row).
    """

    def __init__(self, user_id, email, role, user=None, via='session'):
        self.user_id = user_id
        self.email = email
        self.role = role
        self.user = user
        self.via = via

    @classmethod
    def from_user(cls, user):
        return cls(user.id, user.email, user.role, user=user)

    @property
    def is_admin(self):
        return self.role == User.ROLE_ADMIN

    @property
    def is_recruiter(self):
        return self.role == User.ROLE_RECRUITER

    @property
    def is_candidate(self):
        return self.role == User.ROLE_CANDIDATE

    @property
    def label(self):
        return str(self.user_id) if self.user is not None else self.user_id

    def __repr__(self):
        return f"<Identity {self.label} {self.role} via {self.via}>"


def _signer():
    return signing.TimestampSigner(key=settings.OPERATOR_TOKEN_SECRET, salt=OPERATOR_SALT)


def issue_operator_token(name):
    if not settings.OPERATOR_TOKEN_SECRET:
        raise ValueError("OPERATOR_TOKEN_SECRET is not configured.")
    return _signer().sign_object({'operator': name})


def resolve_operator(token):
    """Return an operator Identity for a valid, unexpired token, else None."""
    if not token or not settings.OPERATOR_TOKEN_SECRET:
        return None
    try:
        payload = _signer().unsign_object(token, max_age=settings.OPERATOR_TOKEN_MAX_AGE)
    except signing.SignatureExpired:
        logger.warning("Ignoring expired operator token.")
        return None
    except signing.BadSignature:
        logger.warning("Ignoring operator token with a bad signature.")
        return None
    name = payload.get('operator') if isinstance(payload, dict) else None
    if not name:
        logger.warning("Ignoring operator token without an operator name.")
        return None
    return Identity(f"operator:{name}", None, User.ROLE_ADMIN, via='operator')


def resolve_identity(request):
    operator = resolve_operator(request.META.get(settings.OPERATOR_TOKEN_HEADER))
    if operator is not None:
        return operator
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return Identity.from_user(user)
    return None
