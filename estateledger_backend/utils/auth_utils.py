from functools import wraps

from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from estateledger_backend.errors import AuthenticationMissing, AuthorizationDenied


def roles_required(*allowed):
    """Usage: @roles_required("ADMIN") or @roles_required("ADMIN", "SECURITY")"""
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            role = get_jwt().get("role")
            if allowed and role not in allowed:
                raise AuthorizationDenied("Forbidden: insufficient role")
            return fn(*args, **kwargs)
        return wrapper
    return deco


def login_required(fn):
    return roles_required()(fn)


def current_identity():
    """(user_id, role, full_name) of the caller, from the verified token."""
    identity = get_jwt_identity()
    if identity is None:
        raise AuthenticationMissing("Unauthorized")
    claims = get_jwt()
    return int(identity), claims.get("role"), claims.get("full_name")
