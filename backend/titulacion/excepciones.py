"""
Excepciones de dominio del motor de titulación.

Los servicios las lanzan antes de modificar cualquier estado; DRF las convierte
en respuestas HTTP mediante `manejador_excepciones`.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ErrorTitulacion(APIException):
    """Excepción base del motor"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Error en el proceso de titulación.'
    error_code = 'TITULACION'

    def __init__(self, detail=None, extra=None):
        super().__init__(detail=detail)
        self.extra = extra or {}


class ErrorValidacion(ErrorTitulacion):
    """Datos fuera de rango o mal formados"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Datos inválidos.'
    error_code = 'VALIDACION'


class ErrorAutorizacion(ErrorTitulacion):
    """El usuario no tiene el rol o la relación requerida"""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'No tiene permiso para realizar esta acción.'
    error_code = 'AUTORIZACION'


class ErrorNoEncontrado(ErrorTitulacion):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Recurso no encontrado.'
    error_code = 'NO_ENCONTRADO'


class ErrorConflicto(ErrorTitulacion):
    """El recurso ya existe o está en un estado terminal"""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'El recurso ya existe.'
    error_code = 'CONFLICTO'


class ErrorPrecondicion(ErrorTitulacion):
    """La etapa previa del proceso no se ha cumplido"""
    status_code = status.HTTP_412_PRECONDITION_FAILED
    default_detail = 'No se cumplen las condiciones previas.'
    error_code = 'PRECONDICION'


def manejador_excepciones(exc, context):
    response = exception_handler(exc, context)

    if response is not None and isinstance(exc, ErrorTitulacion):
        response.data = {
            'detail': exc.detail,
            'error_code': exc.error_code,
            **exc.extra,
        }
        vista = context.get('view')
        logger.warning(
            f"{exc.error_code} en {vista.__class__.__name__ if vista else 'vista desconocida'}: {exc.detail}"
        )

    return response
