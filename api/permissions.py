from rest_framework.permissions import SAFE_METHODS, BasePermission

from core.services.permissions import ADMIN_ROLE_CODES, EDITOR_ROLE_CODES, user_has_role


class IsAdministrator(BasePermission):
    message = "Solo los administradores pueden realizar esta accion."

    def has_permission(self, request, view):
        return user_has_role(request.user, ADMIN_ROLE_CODES)


class IsEditor(BasePermission):
    message = "Sin permiso para modificar cultos."

    def has_permission(self, request, view):
        return user_has_role(request.user, EDITOR_ROLE_CODES)


class IsAdministratorOrReadOnly(BasePermission):
    message = "Solo los administradores pueden realizar esta accion."

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return user_has_role(request.user, ADMIN_ROLE_CODES)
