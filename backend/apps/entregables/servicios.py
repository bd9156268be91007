import logging

from django.db import transaction, IntegrityError
from django.db.models import Max

from .models import EntregableFinal
from apps.progresion.servicios import exigir_carga_documentos
from apps.propuestas.models import Propuesta
from apps.propuestas.servicios import puede_ver_propuesta
from titulacion.excepciones import ErrorAutorizacion, ErrorConflicto, ErrorNoEncontrado, ErrorValidacion

logger = logging.getLogger(__name__)

TIPOS_VALIDOS = [tipo for tipo, _ in EntregableFinal.TIPO_CHOICES]


def subir_entregable(estudiante, tipo, archivo_url):
    """
    Sube una nueva versión de un documento final. La versión activa anterior
    del mismo tipo queda inactiva dentro de la misma transacción.
    """
    if estudiante.role != 'ESTUDIANTE':
        raise ErrorAutorizacion('Solo los estudiantes pueden subir documentos finales')
    if tipo not in TIPOS_VALIDOS:
        raise ErrorValidacion(f"Tipo de entregable inválido. Opciones: {', '.join(TIPOS_VALIDOS)}")
    if not archivo_url:
        raise ErrorValidacion('Debe indicar la URL del archivo')

    propuesta = Propuesta.objects.filter(estudiante=estudiante).first()
    if propuesta is None:
        raise ErrorNoEncontrado('No tienes una propuesta registrada')

    exigir_carga_documentos(propuesta)

    try:
        with transaction.atomic():
            anterior = (
                EntregableFinal.objects
                .select_for_update()
                .filter(propuesta=propuesta, tipo=tipo, activo=True)
                .first()
            )
            if anterior is not None:
                anterior.activo = False
                anterior.save(update_fields=['activo'])

            ultima_version = (
                EntregableFinal.objects
                .filter(propuesta=propuesta, tipo=tipo)
                .aggregate(maxima=Max('version'))['maxima'] or 0
            )
            entregable = EntregableFinal.objects.create(
                propuesta=propuesta,
                tipo=tipo,
                archivo_url=archivo_url,
                version=ultima_version + 1,
                activo=True,
            )
    except IntegrityError:
        raise ErrorConflicto('Otra carga del mismo documento está en curso, intenta nuevamente')

    logger.info(f"{tipo} v{entregable.version} subido para propuesta {propuesta.id} por {estudiante.username}")
    return entregable


def listar_entregables(usuario, propuesta_id=None, historial=False):
    if propuesta_id is None:
        propuesta = Propuesta.objects.filter(estudiante=usuario).first()
        if propuesta is None:
            raise ErrorNoEncontrado('No tienes una propuesta registrada')
    else:
        propuesta = Propuesta.objects.filter(id=propuesta_id).first()
        if propuesta is None:
            raise ErrorNoEncontrado('Propuesta no encontrada')
        if not puede_ver_propuesta(usuario, propuesta):
            raise ErrorAutorizacion('No tienes acceso a esta propuesta')

    queryset = EntregableFinal.objects.filter(propuesta=propuesta)
    if not historial:
        queryset = queryset.filter(activo=True)
    return queryset.order_by('tipo', '-version')
