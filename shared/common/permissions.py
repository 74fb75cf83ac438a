# shared/common/permissions.py
"""
Role-Based Permission Classes

The caller's role comes from the JWT ``role`` claim (see ``TokenUser``).
"""

from typing import FrozenSet, Optional
from rest_framework import permissions
from rest_framework.request import Request
from rest_framework.views import APIView

from .constants import UserRole, REQUESTER_ROLES, PROVIDER_ROLES


def get_user_role(request: Request) -> Optional[str]:
    """Role from the user object, falling back to the raw token payload"""
    if getattr(request.user, 'role', None):
        return request.user.role
    if isinstance(getattr(request, 'auth', None), dict):
        return request.auth.get('role')
    return None


class HasRole(permissions.BasePermission):
    """Check that the caller holds one of ``required_roles``"""

    required_roles: FrozenSet[str] = frozenset()

    def has_permission(self, request: Request, view: APIView) -> bool:
        if not request.user or not request.user.is_authenticated:
            return False

        return get_user_role(request) in self.required_roles


class IsAdmin(HasRole):
    required_roles = frozenset({UserRole.ADMIN.value})


class IsCoach(HasRole):
    """Session providers"""
    required_roles = PROVIDER_ROLES


class IsClient(HasRole):
    """Callers who book sessions"""
    required_roles = REQUESTER_ROLES
