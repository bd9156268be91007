"""
Votación de tutores: cada estudiante ordena hasta tres tutores preferidos
(prioridad 1 a 3) para su propuesta. El personal usa el resumen como insumo
de `asignar_tutor`.
"""
import logging

from django.db import transaction, IntegrityError
from django.db.models import Count, Q

from .models import Propuesta, TrabajoTitulacion, VotacionTutor
from apps.usuarios.models import User
from apps.usuarios.permissions import exigir_rol, exigir_personal
from titulacion.excepciones import (
    ErrorAutorizacion,
    ErrorConflicto,
    ErrorNoEncontrado,
    ErrorPrecondicion,
    ErrorValidacion,
)

logger = logging.getLogger(__name__)

PRIORIDADES = (1, 2, 3)


def _votaciones():
    return VotacionTutor.objects.select_related('estudiante', 'tutor', 'propuesta')


def validar_prioridad(prioridad):
    try:
        prioridad = int(prioridad)
    except (TypeError, ValueError):
        raise ErrorValidacion('La prioridad debe ser 1, 2 o 3')
    if prioridad not in PRIORIDADES:
        raise ErrorValidacion('La prioridad debe ser 1, 2 o 3')
    return prioridad


def votar_tutor(estudiante, propuesta_id, tutor_id, prioridad, justificacion=None):
    """
    Registra o reemplaza el voto del estudiante para una prioridad.
    Devuelve (votacion, creada).
    """
    exigir_rol(estudiante, ('ESTUDIANTE',), 'Solo los estudiantes pueden votar por tutores')
    prioridad = validar_prioridad(prioridad)

    tutor = User.objects.filter(id=tutor_id).first()
    if tutor is None or tutor.role != 'TUTOR':
        raise ErrorValidacion('El usuario seleccionado no es un tutor válido')

    try:
        with transaction.atomic():
            propuesta = Propuesta.objects.select_for_update().filter(id=propuesta_id).first()
            if propuesta is None:
                raise ErrorNoEncontrado('Propuesta no encontrada')
            if propuesta.estudiante_id != estudiante.id:
                raise ErrorAutorizacion('No tiene permiso para votar en esta propuesta')

            repetido = (
                VotacionTutor.objects
                .filter(propuesta=propuesta, tutor=tutor)
                .exclude(prioridad=prioridad)
                .first()
            )
            if repetido is not None:
                raise ErrorConflicto(
                    f'Ya votaste por {tutor.nombre_completo} con prioridad {repetido.prioridad}',
                    extra={'prioridadExistente': repetido.prioridad}
                )

            votacion, creada = VotacionTutor.objects.update_or_create(
                propuesta=propuesta,
                prioridad=prioridad,
                defaults={'estudiante': estudiante, 'tutor': tutor, 'justificacion': justificacion},
            )
    except IntegrityError:
        raise ErrorConflicto('Otra votación para esta prioridad se registró al mismo tiempo')

    logger.info(
        f"{estudiante.username} {'votó' if creada else 'cambió su voto'} por {tutor.username} "
        f"con prioridad {prioridad} en la propuesta {propuesta.id}"
    )
    return votacion, creada


def votaciones_estudiante(usuario, estudiante_id):
    if not usuario.es_personal and usuario.id != int(estudiante_id):
        raise ErrorAutorizacion('No tiene permiso para ver estas votaciones')
    return _votaciones().filter(estudiante_id=estudiante_id).order_by('prioridad')


def votaciones_propuesta(usuario, propuesta_id):
    propuesta = Propuesta.objects.filter(id=propuesta_id).first()
    if propuesta is None:
        raise ErrorNoEncontrado('Propuesta no encontrada')
    if not usuario.es_personal and propuesta.estudiante_id != usuario.id:
        raise ErrorAutorizacion('No tiene permiso para ver estas votaciones')
    return _votaciones().filter(propuesta=propuesta).order_by('prioridad')


def votaciones_tutor(usuario, tutor_id):
    if not usuario.es_personal and usuario.id != int(tutor_id):
        raise ErrorAutorizacion('No tiene permiso para ver estas votaciones')
    return _votaciones().filter(tutor_id=tutor_id).order_by('prioridad', '-fecha_votacion')


def todas_las_votaciones(usuario):
    exigir_personal(usuario, 'Solo directores y coordinadores pueden ver todas las votaciones')
    return _votaciones().order_by('propuesta_id', 'prioridad')


def eliminar_votacion(usuario, votacion_id):
    exigir_rol(usuario, ('ESTUDIANTE',), 'Solo los estudiantes pueden eliminar votaciones')

    votacion = VotacionTutor.objects.filter(id=votacion_id).first()
    if votacion is None:
        raise ErrorNoEncontrado('Votación no encontrada')
    if votacion.estudiante_id != usuario.id:
        raise ErrorAutorizacion('No tiene permiso para eliminar esta votación')
    if TrabajoTitulacion.objects.filter(propuesta_id=votacion.propuesta_id, tutor_id=votacion.tutor_id).exists():
        raise ErrorPrecondicion('No se puede eliminar la votación porque ya se asignó el tutor')

    votacion.delete()
    logger.info(f"{usuario.username} eliminó su votación {votacion_id}")


def resumen_votaciones(usuario):
    """Votos por tutor y prioridad, del más votado al menos votado."""
    exigir_personal(usuario, 'Solo directores y coordinadores pueden ver el resumen')

    conteos = (
        VotacionTutor.objects
        .order_by()
        .values('tutor')
        .annotate(**{
            f'prioridad{p}': Count('id', filter=Q(prioridad=p)) for p in PRIORIDADES
        })
    )
    tutores = User.objects.in_bulk([c['tutor'] for c in conteos])

    resumen = []
    for conteo in conteos:
        votos = {f'prioridad{p}': conteo[f'prioridad{p}'] for p in PRIORIDADES}
        votos['total'] = sum(votos.values())
        resumen.append({'tutor': tutores[conteo['tutor']], 'votaciones': votos})

    resumen.sort(key=lambda r: (-r['votaciones']['total'], r['tutor'].id))
    return resumen
