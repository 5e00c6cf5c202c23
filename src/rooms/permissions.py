from rest_framework import permissions


class IsAdminRoleOrReadOnly(permissions.BasePermission):
    """Read for everyone; write only for admin roles."""
    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_admin_role", False))


class IsBookingOwnerOrAdminRole(permissions.BasePermission):
    """Read allowed for the booking owner or any admin role."""
    def has_object_permission(self, request, view, obj):
        user = request.user
        return bool(
            obj.user_id == getattr(user, "id", None)
            or getattr(user, "is_admin_role", False)
        )
