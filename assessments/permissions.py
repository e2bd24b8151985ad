from rest_framework import permissions

from .transitions import STAFF_ROLES


class IsTeacherOrAdmin(permissions.BasePermission):
    """
    Allows access to Teachers and Admins.
    Strictly blocks Students.
    """
    def has_permission(self, request, view):
        # 1. User must be logged in
        if not request.user or not request.user.is_authenticated:
            return False

        # 2. Check Role
        return request.user.acting_role in STAFF_ROLES


class IsPlatformAdmin(permissions.BasePermission):
    """Admin role (or superuser) only."""
    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_admin)
