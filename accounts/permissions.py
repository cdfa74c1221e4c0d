from typing import NamedTuple, Optional

from rest_framework import permissions

from utils.exceptions import RoleDenied
from .models import UserRole


class RoleCheck(NamedTuple):
    authorized: bool
    redirect_to: Optional[str] = None
    message: Optional[str] = None


def check_role(user, required_role):
    """
    Decide whether ``user`` may enter a view restricted to ``required_role``.

    A missing session sends the caller back to the entry point; a missing or
    different role sends them home with a notice. A failed check is final
    for that navigation.
    """
    if user is None or not user.is_authenticated:
        return RoleCheck(False, '/', 'Please sign in to continue')

    record = UserRole.objects.filter(user=user).first()
    if record is None:
        return RoleCheck(False, '/home', 'Unable to verify your role')
    if record.role != required_role:
        return RoleCheck(False, '/home', f'This page is only accessible to {required_role}s')
    return RoleCheck(True)


def has_role(user, role):
    return check_role(user, role).authorized


class RolePermission(permissions.BasePermission):
    required_role = None

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        result = check_role(request.user, self.required_role)
        if not result.authorized:
            raise RoleDenied(result.message, redirect_to=result.redirect_to)
        return True


class IsOrganizer(RolePermission):
    required_role = UserRole.ORGANIZER


class IsAdmin(RolePermission):
    required_role = UserRole.ADMIN


class IsStudent(RolePermission):
    required_role = UserRole.STUDENT
