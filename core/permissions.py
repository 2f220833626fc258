from typing import Iterable
from rest_framework import permissions


# ---- roles ----
class HasAnyRole(permissions.BasePermission):
    """Authenticated user whose role is one of the allowed ones"""
    allowed: Iterable[str] = ()

    def has_permission(self, request, view) -> bool:
        return bool(
            request.user
            and request.user.is_authenticated
            and (request.user.role in self.allowed)
        )


class IsHROrAdmin(HasAnyRole):
    allowed = ("HR", "ADMIN")


# ---- object permissions ----
class IsOwnProfile(permissions.BasePermission):
    """Object has .user and it is request.user"""

    def has_object_permission(self, request, view, obj) -> bool:
        return request.user.is_authenticated and hasattr(obj, "user") and obj.user_id == request.user.id
