import logging

from django.utils import timezone

from .models import CatalogoPrerequisito, EstudiantePrerequisito
from apps.usuarios.permissions import exigir_rol, exigir_personal
from titulacion.excepciones import ErrorNoEncontrado

logger = logging.getLogger(__name__)


def registrar_cumplimiento(estudiante, prerequisito_id, archivo_url):
    """
    El estudiante sube (o vuelve a subir) el documento de un prerrequisito.
    Cada subida deja el registro pendiente hasta que el personal lo valide.
    """
    exigir_rol(estudiante, ('ESTUDIANTE',), 'Solo los estudiantes pueden subir prerrequisitos')

    try:
        prerequisito = CatalogoPrerequisito.objects.get(id=prerequisito_id, activo=True)
    except CatalogoPrerequisito.DoesNotExist:
        raise ErrorNoEncontrado('Prerrequisito no encontrado')

    cumplimiento, creado = EstudiantePrerequisito.objects.update_or_create(
        estudiante=estudiante,
        prerequisito=prerequisito,
        defaults={
            'archivo_url': archivo_url,
            'cumplido': False,
            'fecha_cumplimiento': None,
        }
    )
    return cumplimiento, creado


def validar_cumplimiento(usuario, cumplimiento_id, cumplido):
    exigir_personal(usuario, 'Solo directores y coordinadores pueden validar prerrequisitos')

    try:
        cumplimiento = EstudiantePrerequisito.objects.get(id=cumplimiento_id)
    except EstudiantePrerequisito.DoesNotExist:
        raise ErrorNoEncontrado('Registro de prerrequisito no encontrado')

    cumplimiento.cumplido = bool(cumplido)
    cumplimiento.fecha_cumplimiento = timezone.now() if cumplimiento.cumplido else None
    cumplimiento.save(update_fields=['cumplido', 'fecha_cumplimiento'])

    logger.info(
        f"Prerrequisito '{cumplimiento.prerequisito.nombre}' de {cumplimiento.estudiante.username} "
        f"{'validado' if cumplimiento.cumplido else 'invalidado'} por {usuario.username}"
    )
    return cumplimiento
