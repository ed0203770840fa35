# accounts/views.py
import logging

from django.conf import settings
from django.contrib.auth import authenticate, login, logout
from django.db import IntegrityError, transaction
from django.db.models import Count
from django.http import JsonResponse
from django.middleware.csrf import get_token
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_http_methods

from hirenest.errors import NotFound, Unauthenticated, Unauthorized, ValidationFailed, form_error_message
from hirenest.http import page_params, paginate, read_json
from jobs import reporting

from .decorators import identity_required, role_required
from .forms import (
    DUPLICATE_EMAIL, AssetUploadForm, CandidateProfileForm, LoginForm, NameForm, RecruiterProfileForm,
    RegistrationForm,
)
from .models import CandidateProfile, RecruiterProfile, User
from .uploads import store_asset

logger = logging.getLogger(__name__)


def _profile_dict(user):
    profile = user.profile
    if isinstance(profile, CandidateProfile):
        return {
            'phone': profile.phone,
            'photo_url': profile.photo_url,
            'resume_url': profile.resume_url,
            'bio': profile.bio,
            'portfolio_url': profile.portfolio_url,
        }
    if isinstance(profile, RecruiterProfile):
        return {
            'company_name': profile.company_name,
            'company_email': profile.company_email,
            'description': profile.description,
        }
    return None


def _user_dict(user):
    return {
        'id': user.id,
        'email': user.email,
        'role': user.role,
        'first_name': user.first_name or None,
        'last_name': user.last_name or None,
        'created_at': user.date_joined,
        'profile': _profile_dict(user),
    }


# -------------------------
# Session auth
# -------------------------
@require_http_methods(["GET"])
@ensure_csrf_cookie
def csrf(request):
    return JsonResponse({'csrf_token': get_token(request)})


@require_http_methods(["POST"])
def register(request):
    form = RegistrationForm(read_json(request))
    if not form.is_valid():
        raise ValidationFailed(form_error_message(form))
    data = form.cleaned_data

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=data['email'],
                email=data['email'],
                password=data['password'],
                role=data['role'],
                first_name=data.get('first_name', ''),
                last_name=data.get('last_name', ''),
            )
            if user.is_candidate():
                CandidateProfile.objects.create(user=user, phone=data.get('phone') or None)
            else:
                RecruiterProfile.objects.create(
                    user=user,
                    company_name=data['company_name'],
                    company_email=data['company_email'],
                    description=data.get('description') or None,
                )
    except IntegrityError:
        # a concurrent registration took the email after clean_email ran
        logger.info("Duplicate registration blocked by constraint: %s", data['email'])
        raise ValidationFailed(DUPLICATE_EMAIL)

    logger.info("Registered %s user %s", user.role, user.id)
    return JsonResponse({
        'message': "Registration successful! Please login to continue.",
        'user': {'id': user.id, 'email': user.email, 'role': user.role},
    })


@require_http_methods(["POST"])
def login_view(request):
    form = LoginForm(read_json(request))
    if not form.is_valid():
        raise ValidationFailed("Email and password are required")
    email = form.cleaned_data['email'].strip().lower()
    user = authenticate(request, username=email, password=form.cleaned_data['password'])
    if user is None:
        raise Unauthenticated("Invalid login credentials")
    login(request, user)
    return JsonResponse({'message': "Login successful", 'user': _user_dict(user)})


@require_http_methods(["POST"])
def logout_view(request):
    logout(request)
    return JsonResponse({'message': "Logged out successfully"})


@require_http_methods(["GET", "PATCH"])
@identity_required
def me(request):
    identity = request.identity
    if identity.user is None:
        if request.method == 'PATCH':
            raise Unauthorized("Operators have no profile to update.")
        return JsonResponse({'user': {
            'id': identity.user_id, 'email': None, 'role': identity.role, 'profile': None, 'operator': True,
        }})

    user = identity.user
    if request.method == 'GET':
        return JsonResponse({'user': _user_dict(user)})

    payload = read_json(request)
    forms = [NameForm(payload, instance=user)]
    profile = user.profile
    if isinstance(profile, CandidateProfile):
        forms.append(CandidateProfileForm(payload, instance=profile))
    elif isinstance(profile, RecruiterProfile):
        forms.append(RecruiterProfileForm(payload, instance=profile))

    for form in forms:
        if not form.is_valid():
            raise ValidationFailed(form_error_message(form))
    with transaction.atomic():
        for form in forms:
            form.save()

    user.refresh_from_db()
    return JsonResponse({'message': "Profile updated successfully", 'user': _user_dict(user)})


@require_http_methods(["POST"])
@role_required(User.ROLE_CANDIDATE, message="Only candidates can upload a photo or resume")
def upload_asset(request):
    form = AssetUploadForm(request.POST, request.FILES)
    if not form.is_valid():
        raise ValidationFailed(form_error_message(form))
    kind = form.cleaned_data['type']
    profile, _ = CandidateProfile.objects.get_or_create(user=request.identity.user)
    url = store_asset(request, profile, kind, form.cleaned_data['file'])
    return JsonResponse({'message': "File uploaded successfully", 'url': url, 'type': kind})


# -------------------------
# Admin console
# -------------------------
@require_http_methods(["GET"])
@role_required(User.ROLE_ADMIN, message="Admin access required")
def admin_overview(request):
    return JsonResponse(reporting.platform_overview())


@require_http_methods(["GET"])
@role_required(User.ROLE_ADMIN, message="Admin access required")
def admin_users(request):
    role = request.GET.get('role', '').strip()
    if role and role not in dict(User.ROLE_CHOICES):
        raise ValidationFailed("Invalid role")
    page, limit = page_params(request, settings.ADMIN_USERS_PAGE_SIZE)

    qs = (
        User.objects
        .select_related('candidate_profile', 'recruiter_profile')
        .annotate(
            jobs_count=Count('posted_jobs', distinct=True),
            applications_count=Count('applications', distinct=True),
        )
        .order_by('-date_joined', '-id')
    )
    if role:
        qs = qs.filter(role=role)

    users, pagination = paginate(qs, page, limit)
    rows = []
    for user in users:
        row = _user_dict(user)
        row['jobs_count'] = user.jobs_count
        row['applications_count'] = user.applications_count
        rows.append(row)
    return JsonResponse({'users': rows, 'pagination': pagination})


@require_http_methods(["DELETE"])
@role_required(User.ROLE_ADMIN, message="Admin access required")
def admin_delete_user(request, user_id):
    if request.identity.user_id == user_id:
        raise ValidationFailed("Cannot delete yourself")
    user = User.objects.filter(pk=user_id).first()
    if user is None:
        raise NotFound("User not found")
    # jobs, applications, profiles and status events go with the user
    user.delete()
    logger.info("User %s (%s) deleted by %s", user_id, user.role, request.identity.label)
    return JsonResponse({'message': "User deleted successfully"})
