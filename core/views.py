"""
Core views – JSON authentication endpoints for the portal SPA.
"""
import logging

from axes.decorators import axes_dispatch
from django.contrib.auth import authenticate, login, logout, update_session_auth_hash
from django.http import JsonResponse
from django.middleware.csrf import get_token
from django.views.decorators.cache import never_cache
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from core.exceptions import PortalValidationError
from core.forms import PasswordChangeForm, RegistrationForm, first_error
from core.models import User
from core.utils.audit import get_client_ip, log_action
from core.utils.http import api_login_required, parse_json_body

logger = logging.getLogger(__name__)
auth_logger = logging.getLogger('meduaid.auth')


@require_GET
@ensure_csrf_cookie
def csrf_view(request):
    """
    GET /api/auth/csrf – sets the CSRF cookie before the first POST.
    The token is echoed in the body since production marks the cookie HttpOnly.
    """
    return JsonResponse({'detail': 'CSRF cookie set', 'csrf_token': get_token(request)})


@require_POST
def register_view(request):
    """POST /api/auth/register – writers sign themselves up."""
    form = RegistrationForm(parse_json_body(request))
    if not form.is_valid():
        raise PortalValidationError(first_error(form))

    user = User.objects.create_user(
        email=form.cleaned_data['email'],
        password=form.cleaned_data['password'],
        name=form.cleaned_data['name'],
        role=User.ROLE_WRITER,
    )
    auth_logger.info(
        "REGISTER | user=%s | ip=%s", user.email, get_client_ip(request)
    )
    log_action(request, 'CREATE', 'User', user.id, f'{user.email} registered')
    return JsonResponse({'user': user.to_dict(), 'message': 'Registration successful'}, status=201)


@axes_dispatch
@never_cache
@require_POST
def login_view(request):
    """POST /api/auth/login – email + password, starts a session."""
    data = parse_json_body(request)
    email = str(data.get('email', '')).strip()
    password = data.get('password', '')

    if not email or not password:
        raise PortalValidationError('Please provide both email and password')

    user = authenticate(request, email=email, password=password)
    if user is None:
        return JsonResponse(
            {'error': 'Invalid email or password', 'code': 'InvalidCredentials'},
            status=401,
        )

    login(request, user)
    logger.info(
        "User '%s' logged in successfully from IP %s.",
        user.email, get_client_ip(request)
    )
    log_action(request, 'LOGIN', 'User', user.id,
               f'{user.name} logged in (role: {user.role_display})')
    return JsonResponse({'user': user.to_dict()})


@require_POST
def logout_view(request):
    """POST /api/auth/logout"""
    if request.user.is_authenticated:
        log_action(request, 'LOGOUT', 'User', request.user.id,
                   f'{request.user.name} logged out')
    logout(request)
    return JsonResponse({'message': 'Logged out'})


@api_login_required
@require_GET
@ensure_csrf_cookie
def me_view(request):
    """GET /api/auth/me – the logged-in user."""
    return JsonResponse({'user': request.user.to_dict()})


@api_login_required
@require_POST
def change_password_view(request):
    """POST /api/auth/change-password"""
    form = PasswordChangeForm(request.user, parse_json_body(request))
    if not form.is_valid():
        raise PortalValidationError(first_error(form))

    user = request.user
    user.set_password(form.cleaned_data['new_password'])
    user.save()
    # Keep the current session valid after the hash changes
    update_session_auth_hash(request, user)

    auth_logger.info(
        "PASSWORD_CHANGED | user=%s | ip=%s", user.email, get_client_ip(request)
    )
    log_action(request, 'UPDATE', 'User', user.id, f'{user.name} changed their password')
    return JsonResponse({'message': 'Password updated'})
