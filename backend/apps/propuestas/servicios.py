import logging

from django.db import transaction, IntegrityError

from .models import Propuesta, TrabajoTitulacion
from apps.progresion.servicios import puede_crear_propuesta
from apps.usuarios.models import User, ROLES_PERSONAL
from apps.usuarios.permissions import exigir_rol, exigir_personal
from notificaciones import eventos
from titulacion.excepciones import ErrorConflicto, ErrorNoEncontrado, ErrorPrecondicion, ErrorValidacion

logger = logging.getLogger(__name__)

ESTADOS_REVISION = ('PENDIENTE', 'APROBADA', 'APROBADA_CON_COMENTARIOS', 'RECHAZADA')


def obtener_propuesta(propuesta_id):
    try:
        return Propuesta.objects.select_related('estudiante').get(id=propuesta_id)
    except Propuesta.DoesNotExist:
        raise ErrorNoEncontrado('Propuesta no encontrada')


def propuesta_del_estudiante(estudiante):
    try:
        return Propuesta.objects.get(estudiante=estudiante)
    except Propuesta.DoesNotExist:
        raise ErrorNoEncontrado('El estudiante no tiene una propuesta registrada')


def tutor_activo(propuesta):
    trabajo = (
        TrabajoTitulacion.objects
        .select_related('tutor')
        .filter(propuesta=propuesta, estado_asignacion='ACTIVO')
        .first()
    )
    return trabajo.tutor if trabajo else None


def es_tutor_de(usuario, propuesta):
    return TrabajoTitulacion.objects.filter(
        propuesta=propuesta, tutor=usuario, estado_asignacion='ACTIVO'
    ).exists()


def crear_propuesta(estudiante, titulo, area_conocimiento, descripcion=None):
    exigir_rol(estudiante, ('ESTUDIANTE',), 'Solo los estudiantes pueden crear propuestas')

    resultado = puede_crear_propuesta(estudiante)
    if not resultado.puede_crear:
        raise ErrorPrecondicion(
            resultado.mensaje,
            extra={'cumplidos': resultado.cumplidos, 'totalRequisitos': resultado.total_requisitos}
        )

    if Propuesta.objects.filter(estudiante=estudiante).exists():
        raise ErrorConflicto('Ya tienes una propuesta registrada')

    try:
        with transaction.atomic():
            propuesta = Propuesta.objects.create(
                estudiante=estudiante,
                titulo=titulo,
                area_conocimiento=area_conocimiento,
                descripcion=descripcion,
            )
    except IntegrityError:
        raise ErrorConflicto('Ya tienes una propuesta registrada')

    logger.info(f"Propuesta {propuesta.id} creada por {estudiante.username}")
    return propuesta


def revisar_propuesta(usuario, propuesta_id, estado, comentarios=None):
    exigir_personal(usuario, 'Solo directores y coordinadores pueden revisar propuestas')

    if estado not in ESTADOS_REVISION:
        raise ErrorValidacion(f"Estado inválido: {estado}")

    with transaction.atomic():
        propuesta = Propuesta.objects.select_for_update().filter(id=propuesta_id).first()
        if propuesta is None:
            raise ErrorNoEncontrado('Propuesta no encontrada')

        propuesta.estado = estado
        propuesta.comentarios_revision = comentarios
        propuesta.save(update_fields=['estado', 'comentarios_revision', 'ultima_modificacion'])
        eventos.emitir(eventos.propuesta_revisada, sender=Propuesta, propuesta=propuesta, revisor=usuario)

    logger.info(f"Propuesta {propuesta.id} revisada por {usuario.username}: {estado}")
    return propuesta


def asignar_tutor(usuario, propuesta_id, tutor_id, observaciones=None):
    exigir_personal(usuario, 'Solo directores y coordinadores pueden asignar tutores')

    propuesta = obtener_propuesta(propuesta_id)

    tutor = User.objects.filter(id=tutor_id, role='TUTOR').first()
    if tutor is None:
        raise ErrorNoEncontrado('Tutor no encontrado o el usuario no tiene rol TUTOR')

    if not propuesta.aprobada:
        raise ErrorPrecondicion('Solo se pueden asignar tutores a propuestas aprobadas')

    try:
        with transaction.atomic():
            if TrabajoTitulacion.objects.select_for_update().filter(
                    propuesta=propuesta, estado_asignacion='ACTIVO').exists():
                raise ErrorPrecondicion('Esta propuesta ya tiene un tutor asignado')

            trabajo = TrabajoTitulacion.objects.create(
                propuesta=propuesta,
                tutor=tutor,
                observaciones=observaciones,
            )
            eventos.emitir(eventos.tutor_asignado, sender=TrabajoTitulacion, trabajo=trabajo)
    except IntegrityError:
        raise ErrorPrecondicion('Esta propuesta ya tiene un tutor asignado')

    logger.info(f"Tutor {tutor.username} asignado a propuesta {propuesta.id} por {usuario.username}")
    return trabajo


def puede_ver_propuesta(usuario, propuesta):
    if usuario.role in ROLES_PERSONAL or usuario.role == 'DOCENTE_INTEGRACION':
        return True
    if usuario.id == propuesta.estudiante_id:
        return True
    return usuario.role == 'TUTOR' and es_tutor_de(usuario, propuesta)
