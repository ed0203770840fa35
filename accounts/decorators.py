from functools import wraps

from hirenest.errors import Unauthenticated, Unauthorized


def identity_required(view_func):
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if getattr(request, 'identity', None) is None:
            raise Unauthenticated()
        return view_func(request, *args, **kwargs)
    return _wrapped


def role_required(*roles, message=None):
    """
    Require an authenticated caller whose role is one of ``roles``.
    Missing identity is 401, wrong role is 403.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            identity = getattr(request, 'identity', None)
            if identity is None:
                raise Unauthenticated()
            if identity.role not in roles:
                raise Unauthorized(message or f"{' or '.join(r.title() for r in roles)} access required.")
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator
