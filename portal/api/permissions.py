"""
Role guards for the admin-only and writer-only endpoints.
"""
from core.exceptions import Forbidden
from core.policy import Caller


def require_admin(request):
    caller = Caller.from_user(request.user)
    if not caller.is_admin:
        raise Forbidden('Admin access required')
    return caller


def require_writer(request):
    caller = Caller.from_user(request.user)
    if not caller.is_writer:
        raise Forbidden('Writer access required')
    return caller
