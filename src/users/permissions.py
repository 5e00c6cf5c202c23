from rest_framework import permissions


class IsAdminRole(permissions.BasePermission):
    """Admin or super admin (by `role`, not `is_staff`)."""
    message = "Admin access required."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_admin_role", False))


class IsSuperAdmin(permissions.BasePermission):
    message = "Super admin access required."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_super_admin", False))
