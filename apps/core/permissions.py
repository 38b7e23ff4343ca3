"""
Permission classes for role-based access control.
"""

from rest_framework import permissions

from .models import User


class HasRole(permissions.BasePermission):
    """
    Permission class granting access to active users holding one of ``allowed_roles``.

    Anonymous requests fail ``is_authenticated`` and DRF answers them with 401,
    authenticated users with the wrong role get 403.
    """

    allowed_roles = ()
    message = "Your role does not allow this action."

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user and user.is_authenticated and user.is_active and user.role in self.allowed_roles
        )


class IsAdministrator(HasRole):
    allowed_roles = (User.ADMINISTRATOR,)
    message = "Only administrators can perform this action."


class IsManagerOrAbove(HasRole):
    allowed_roles = (User.ADMINISTRATOR, User.MANAGER)
    message = "Only managers and administrators can perform this action."


class IsCashierOrAbove(HasRole):
    allowed_roles = (User.ADMINISTRATOR, User.MANAGER, User.CASHIER)


class IsManagerOrReadOnly(HasRole):
    """
    Any POS role may read, only managers and administrators may write.
    """

    allowed_roles = (User.ADMINISTRATOR, User.MANAGER, User.CASHIER)
    message = "Only managers and administrators can modify this resource."

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return request.user.is_manager_or_above()


class HasPosPermission(permissions.BasePermission):
    """
    Check the view's ``required_permission`` against the role permission map.

    Usage:
        class MyView(APIView):
            permission_classes = [HasPosPermission]
            required_permission = "reports.view"
    """

    message = "Your role does not grant this permission."

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated and user.is_active):
            return False
        required = getattr(view, "required_permission", None)
        if required is None:
            return True
        return user.has_permission(required)
