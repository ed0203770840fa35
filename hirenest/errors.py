"""
Error taxonomy for the API.

Views and services raise these; ``hirenest.middleware.ApiErrorMiddleware``
turns them into ``{"error": ..., "code": ...}`` JSON responses.
"""


class ApiError(Exception):
    status = 500
    code = 'error'
    default_message = 'Something went wrong.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self):
        return {'error': self.message, 'code': self.code}


class Unauthenticated(ApiError):
    status = 401
    code = 'unauthenticated'
    default_message = 'Authentication required.'


class Unauthorized(ApiError):
    status = 403
    code = 'unauthorized'
    default_message = 'You are not allowed to do this.'


class ValidationFailed(ApiError):
    status = 400
    code = 'validation'
    default_message = 'Invalid input.'


class NotFound(ApiError):
    status = 404
    code = 'not_found'
    default_message = 'Not found.'


class Conflict(ApiError):
    # Reported as 400 so clients handle it like any other rejected write.
    status = 400
    code = 'conflict'
    default_message = 'Conflicting change.'


class Upstream(ApiError):
    status = 500
    code = 'upstream'
    default_message = 'The service is temporarily unavailable. Please try again.'


def form_error_message(form):
    """Flatten a bound form's errors into one human-readable sentence."""
    messages = []
    for field, errors in form.errors.items():
        for error in errors:
            if field == '__all__':
                messages.append(str(error))
            else:
                messages.append(f"{field}: {error}")
    return ' '.join(messages) or ValidationFailed.default_message
