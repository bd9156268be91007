from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import ROLES_PERSONAL
from titulacion.excepciones import ErrorAutorizacion


def exigir_rol(usuario, roles, mensaje=None):
    """Lanza ErrorAutorizacion si el rol del usuario no está en `roles`."""
    if usuario is None or not usuario.is_authenticated or usuario.role not in roles:
        raise ErrorAutorizacion(mensaje or f"Acción permitida solo para: {', '.join(roles)}")


def exigir_personal(usuario, mensaje=None):
    exigir_rol(usuario, ROLES_PERSONAL, mensaje or 'Solo directores y coordinadores pueden realizar esta acción')


class IsPersonalTitulacion(BasePermission):
    """
    Solo directores y coordinadores pueden acceder
    """
    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.es_personal


class IsPersonalOrReadOnly(BasePermission):
    """
    Cualquier usuario autenticado puede leer; solo el personal modifica.
    """
    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return request.user.is_authenticated

        return request.user.is_authenticated and request.user.es_personal


class IsEstudiante(BasePermission):
    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.role == 'ESTUDIANTE'
