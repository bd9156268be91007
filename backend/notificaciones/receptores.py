"""Entrega de los eventos de dominio: notificación interna y correo."""
import logging

from django.dispatch import receiver

from . import eventos
from .servicios import notificar, enviar_correo_defensa

logger = logging.getLogger(__name__)


def _correo_defensa(evaluacion, destinatario, rol, para_estudiante):
    propuesta = evaluacion.propuesta
    estudiante = propuesta.estudiante
    enviar_correo_defensa(
        destinatario=destinatario.email,
        nombre=destinatario.nombre_completo,
        rol=rol,
        tema=propuesta.titulo,
        fecha=evaluacion.fecha_defensa.isoformat() if evaluacion.fecha_defensa else None,
        hora=evaluacion.hora_defensa.strftime('%H:%M') if evaluacion.hora_defensa else None,
        aula=evaluacion.aula,
        tipo=evaluacion.get_tipo_display(),
        estudiante_nombre=None if para_estudiante else estudiante.nombre_completo,
    )


def _detalle_programacion(evaluacion):
    fecha = evaluacion.fecha_defensa.isoformat() if evaluacion.fecha_defensa else 'por definir'
    hora = evaluacion.hora_defensa.strftime('%H:%M') if evaluacion.hora_defensa else '--:--'
    return f"{fecha} a las {hora}, aula {evaluacion.aula or 'por asignar'}"


@receiver(eventos.propuesta_revisada)
def avisar_revision_propuesta(sender, propuesta, revisor, **kwargs):
    notificar(
        propuesta.estudiante,
        'Tu propuesta fue revisada',
        f"La propuesta '{propuesta.titulo}' quedó en estado {propuesta.get_estado_display()}.",
        tipo='PROPUESTA',
        evento='propuesta_revisada',
    )


@receiver(eventos.tutor_asignado)
def avisar_tutor_asignado(sender, trabajo, **kwargs):
    propuesta = trabajo.propuesta
    notificar(
        propuesta.estudiante,
        'Tutor asignado',
        f"{trabajo.tutor.nombre_completo} es ahora tu tutor de titulación.",
        tipo='PROPUESTA',
        evento='tutor_asignado',
    )
    notificar(
        trabajo.tutor,
        'Nueva tutoría asignada',
        f"Se te asignó la propuesta '{propuesta.titulo}' de {propuesta.estudiante.nombre_completo}.",
        tipo='PROPUESTA',
        evento='tutor_asignado',
    )


@receiver(eventos.actividad_creada)
def avisar_actividad_creada(sender, actividad, **kwargs):
    notificar(
        actividad.propuesta.estudiante,
        'Nueva actividad',
        f"Se creó la actividad '{actividad.nombre}'.",
        tipo='ACTIVIDAD',
        evento='actividad_creada',
        url_accion=f"/actividades/{actividad.id}",
    )


@receiver(eventos.evidencia_entregada)
def avisar_evidencia_entregada(sender, evidencia, estudiante, **kwargs):
    from apps.propuestas.servicios import tutor_activo

    tutor = tutor_activo(evidencia.actividad.propuesta)
    if tutor is None:
        logger.info(f"Evidencia {evidencia.id} entregada sin tutor activo que notificar")
        return
    notificar(
        tutor,
        'Nueva evidencia para revisar',
        f"{estudiante.nombre_completo} entregó la evidencia de la semana {evidencia.semana} "
        f"en '{evidencia.actividad.nombre}'.",
        tipo='EVIDENCIA',
        evento='evidencia_entregada',
        url_accion=f"/actividades/{evidencia.actividad_id}/evidencias",
    )


@receiver(eventos.evidencia_calificada)
def avisar_evidencia_calificada(sender, evidencia, calificador, pista, **kwargs):
    nota = evidencia.calificacion_tutor if pista == 'TUTOR' else evidencia.calificacion_docente
    quien = 'tu tutor' if pista == 'TUTOR' else 'el docente de integración'
    notificar(
        evidencia.actividad.propuesta.estudiante,
        'Evidencia calificada',
        f"La evidencia de la semana {evidencia.semana} fue revisada por {quien}"
        f"{f' con nota {nota}' if nota is not None else ''}.",
        tipo='EVIDENCIA',
        evento='evidencia_calificada',
    )


@receiver(eventos.defensa_programada)
def avisar_defensa_programada(sender, evaluacion, **kwargs):
    if not evaluacion.fecha_defensa:
        return
    estudiante = evaluacion.propuesta.estudiante
    notificar(
        estudiante,
        f"Defensa {evaluacion.get_tipo_display().lower()} programada",
        f"Tu defensa {evaluacion.get_tipo_display().lower()} es el {_detalle_programacion(evaluacion)}.",
        tipo='DEFENSA',
        evento='defensa_programada',
    )
    _correo_defensa(evaluacion, estudiante, 'Estudiante', para_estudiante=True)


@receiver(eventos.defensa_actualizada)
def avisar_defensa_actualizada(sender, evaluacion, **kwargs):
    estudiante = evaluacion.propuesta.estudiante
    mensaje = f"La defensa {evaluacion.get_tipo_display().lower()} se reprogramó: {_detalle_programacion(evaluacion)}."

    destinatarios = [(estudiante, 'Estudiante', True)] + [
        (participante.usuario, participante.rol or participante.tipo_participante, False)
        for participante in evaluacion.participantes.select_related('usuario')
    ]
    # Cada destinatario se entrega por separado; un fallo no corta al resto
    for usuario, rol, para_estudiante in destinatarios:
        try:
            notificar(usuario, 'Defensa reprogramada', mensaje, tipo='DEFENSA', evento='defensa_actualizada')
            _correo_defensa(evaluacion, usuario, rol, para_estudiante=para_estudiante)
        except Exception:
            logger.exception(f"Error avisando la reprogramación de la defensa {evaluacion.id} a {usuario.username}")


@receiver(eventos.participante_asignado)
def avisar_participante_asignado(sender, participante, **kwargs):
    evaluacion = participante.evaluacion
    estudiante = evaluacion.propuesta.estudiante
    rol = participante.rol or participante.tipo_participante

    notificar(
        estudiante,
        'Tribunal actualizado',
        f"{participante.usuario.nombre_completo} integra el tribunal de tu defensa "
        f"{evaluacion.get_tipo_display().lower()} como {rol}.",
        tipo='DEFENSA',
        evento='participante_asignado',
    )
    notificar(
        participante.usuario,
        'Asignación a tribunal',
        f"Fuiste designado como {rol} en la defensa {evaluacion.get_tipo_display().lower()} "
        f"de {estudiante.nombre_completo}.",
        tipo='DEFENSA',
        evento='participante_asignado',
    )
    if evaluacion.fecha_defensa:
        _correo_defensa(evaluacion, participante.usuario, rol, para_estudiante=False)


@receiver(eventos.defensa_evaluada)
def avisar_defensa_evaluada(sender, evaluacion, **kwargs):
    nota = f" con promedio {evaluacion.calificacion}" if evaluacion.calificacion is not None else ''
    notificar(
        evaluacion.propuesta.estudiante,
        f"Resultado de la defensa {evaluacion.get_tipo_display().lower()}",
        f"Tu defensa fue {evaluacion.get_estado_display().lower()}{nota}.",
        tipo='DEFENSA',
        evento='defensa_evaluada',
    )


@receiver(eventos.defensa_desbloqueada)
def avisar_defensa_desbloqueada(sender, evaluacion, **kwargs):
    notificar(
        evaluacion.propuesta.estudiante,
        'Defensa pública habilitada',
        'Aprobaste la defensa privada; tu defensa pública ya puede programarse.',
        tipo='DEFENSA',
        evento='defensa_desbloqueada',
    )
