"""
API role guard.

Returns a JSON 401 for anonymous callers and a JSON 403 for authenticated
callers whose role is not in the allowed set. The resolved role is attached
to the request as `request.actor_role` for the view to use.
"""
from functools import wraps
from django.http import JsonResponse

from .roles import GUEST, actor_role


def role_required(*roles):
    """Require the caller's role to be one of `roles`."""
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            role = actor_role(request.user)
            if role not in roles:
                if role == GUEST:
                    return JsonResponse(
                        {'code': 'AUTHENTICATION_REQUIRED', 'detail': 'Please sign in.'},
                        status=401,
                    )
                return JsonResponse(
                    {'code': 'FORBIDDEN', 'detail': 'Your account cannot perform this action.'},
                    status=403,
                )
            request.actor_role = role
            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator
