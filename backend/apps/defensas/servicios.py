"""
Evaluación de defensas (privada y pública) por un tribunal.

Estados: PENDIENTE -> PROGRAMADA -> REALIZADA -> APROBADA | RECHAZADA.
Cuando todos los participantes califican, el promedio decide el estado final.
Una privada aprobada desbloquea la pública; una pública finalizada fija el
resultado de la propuesta.
"""
import logging

from django.db import transaction, IntegrityError
from django.utils import timezone

from .models import EvaluacionDefensa, ParticipanteDefensa
from apps.actividades.calificacion import redondear
from apps.actividades.servicios import validar_nota
from apps.progresion.servicios import exigir_elegibilidad_defensa
from apps.propuestas.servicios import obtener_propuesta
from apps.usuarios.models import User, ROLES_TRIBUNAL
from apps.usuarios.permissions import exigir_personal
from notificaciones import eventos
from titulacion.configuracion import obtener_reglas
from titulacion.excepciones import (
    ErrorAutorizacion,
    ErrorConflicto,
    ErrorNoEncontrado,
    ErrorPrecondicion,
    ErrorValidacion,
)

logger = logging.getLogger(__name__)

ESTADOS_VALIDOS = [estado for estado, _ in EvaluacionDefensa.ESTADO_CHOICES]
CAMPOS_PROGRAMACION = ('fecha_defensa', 'hora_defensa', 'aula')
CAMPOS_EDITABLES = CAMPOS_PROGRAMACION + ('estado', 'comentarios')


def _bloquear_evaluacion(evaluacion_id):
    evaluacion = (
        EvaluacionDefensa.objects
        .select_for_update()
        .select_related('propuesta')
        .filter(id=evaluacion_id)
        .first()
    )
    if evaluacion is None:
        raise ErrorNoEncontrado('Evaluación de defensa no encontrada')
    return evaluacion


def obtener_evaluacion(evaluacion_id):
    try:
        return EvaluacionDefensa.objects.select_related('propuesta', 'propuesta__estudiante').get(id=evaluacion_id)
    except EvaluacionDefensa.DoesNotExist:
        raise ErrorNoEncontrado('Evaluación de defensa no encontrada')


def _crear_evaluacion(propuesta, tipo, fecha_defensa, hora_defensa, aula, comentarios):
    try:
        with transaction.atomic():
            evaluacion = EvaluacionDefensa.objects.create(
                propuesta=propuesta,
                tipo=tipo,
                fecha_defensa=fecha_defensa,
                hora_defensa=hora_defensa,
                aula=aula,
                comentarios=comentarios,
                estado='PROGRAMADA' if fecha_defensa else 'PENDIENTE',
            )
            eventos.emitir(eventos.defensa_programada, sender=EvaluacionDefensa, evaluacion=evaluacion)
    except IntegrityError:
        raise ErrorConflicto(f'Ya existe una defensa {tipo.lower()} para esta propuesta')
    return evaluacion


def crear_defensa_privada(usuario, propuesta_id, fecha_defensa=None, hora_defensa=None, aula=None,
                          comentarios=None):
    exigir_personal(usuario, 'Solo directores y coordinadores pueden crear defensas')
    propuesta = obtener_propuesta(propuesta_id)

    exigir_elegibilidad_defensa(propuesta)
    if EvaluacionDefensa.objects.filter(propuesta=propuesta, tipo='PRIVADA').exists():
        raise ErrorConflicto('Ya existe una defensa privada para esta propuesta')

    evaluacion = _crear_evaluacion(propuesta, 'PRIVADA', fecha_defensa, hora_defensa, aula, comentarios)
    logger.info(f"Defensa privada {evaluacion.id} creada para propuesta {propuesta.id} ({evaluacion.estado})")
    return evaluacion


def privada_habilita_publica(privada, nota_aprobacion=None):
    if privada is None:
        return False
    if nota_aprobacion is None:
        nota_aprobacion = obtener_reglas().nota_aprobacion_defensa
    if privada.estado == 'APROBADA':
        return True
    return privada.calificacion is not None and privada.calificacion >= nota_aprobacion


def crear_defensa_publica(usuario, propuesta_id, fecha_defensa=None, hora_defensa=None, aula=None,
                          comentarios=None):
    exigir_personal(usuario, 'Solo directores y coordinadores pueden crear defensas')
    propuesta = obtener_propuesta(propuesta_id)

    privada = EvaluacionDefensa.objects.filter(propuesta=propuesta, tipo='PRIVADA').first()
    if not privada_habilita_publica(privada):
        raise ErrorPrecondicion(
            'El estudiante debe aprobar la defensa privada (nota mínima 7) antes de la defensa pública',
            extra={
                'estadoPrivada': privada.estado if privada else None,
                'calificacionPrivada': str(privada.calificacion) if privada and privada.calificacion is not None else None,
            }
        )
    if EvaluacionDefensa.objects.filter(propuesta=propuesta, tipo='PUBLICA').exists():
        raise ErrorConflicto('Ya existe una defensa pública para esta propuesta')

    evaluacion = _crear_evaluacion(propuesta, 'PUBLICA', fecha_defensa, hora_defensa, aula, comentarios)
    logger.info(f"Defensa pública {evaluacion.id} creada para propuesta {propuesta.id} ({evaluacion.estado})")
    return evaluacion


def agregar_participante(usuario, evaluacion_id, usuario_id, tipo_participante=None, rol=''):
    """
    Asigna (o reasigna) un miembro del tribunal. El tipo guardado es siempre el
    rol real del usuario; `tipo_participante` solo se registra en el log si difiere.
    """
    exigir_personal(usuario, 'Solo directores y coordinadores pueden asignar el tribunal')

    with transaction.atomic():
        evaluacion = _bloquear_evaluacion(evaluacion_id)

        miembro = User.objects.filter(id=usuario_id).first()
        if miembro is None:
            raise ErrorNoEncontrado('Usuario no encontrado')
        if not miembro.puede_ser_tribunal:
            raise ErrorValidacion(
                f"El rol {miembro.role} no puede integrar el tribunal. Roles permitidos: {', '.join(ROLES_TRIBUNAL)}"
            )
        if tipo_participante and tipo_participante != miembro.role:
            logger.warning(
                f"Tipo de participante solicitado {tipo_participante} no coincide con el rol real "
                f"{miembro.role} de {miembro.username}; se guarda el rol real"
            )

        participante, creado = ParticipanteDefensa.objects.update_or_create(
            evaluacion=evaluacion,
            usuario=miembro,
            defaults={'tipo_participante': miembro.role, 'rol': rol or ''},
        )
        eventos.emitir(eventos.participante_asignado, sender=ParticipanteDefensa, participante=participante)

    logger.info(
        f"{miembro.username} {'asignado a' if creado else 'actualizado en'} "
        f"la defensa {evaluacion.id} como {participante.rol or participante.tipo_participante}"
    )
    return participante, creado


def _aplicar_resultado(evaluacion):
    if evaluacion.tipo == 'PRIVADA' and evaluacion.estado == 'APROBADA':
        publica = (
            EvaluacionDefensa.objects
            .select_for_update()
            .filter(propuesta_id=evaluacion.propuesta_id, tipo='PUBLICA', estado='BLOQUEADA')
            .first()
        )
        if publica is not None:
            publica.estado = 'PENDIENTE'
            publica.save(update_fields=['estado'])
            eventos.emitir(eventos.defensa_desbloqueada, sender=EvaluacionDefensa, evaluacion=publica)
            logger.info(f"Defensa pública {publica.id} desbloqueada por aprobación de la privada {evaluacion.id}")

    elif evaluacion.tipo == 'PUBLICA' and evaluacion.finalizada:
        propuesta = evaluacion.propuesta
        propuesta.resultado_defensa = 'APROBADO' if evaluacion.estado == 'APROBADA' else 'REPROBADO'
        propuesta.save(update_fields=['resultado_defensa', 'ultima_modificacion'])
        logger.info(f"Propuesta {propuesta.id} con resultado final {propuesta.resultado_defensa}")


def calificar_como_participante(usuario, evaluacion_id, calificacion, comentario=None):
    nota = validar_nota(calificacion, requerida=True)
    reglas = obtener_reglas()

    with transaction.atomic():
        evaluacion = _bloquear_evaluacion(evaluacion_id)

        participante = ParticipanteDefensa.objects.filter(evaluacion=evaluacion, usuario=usuario).first()
        if participante is None:
            raise ErrorAutorizacion('Solo los miembros del tribunal pueden calificar esta defensa')
        if evaluacion.finalizada:
            raise ErrorConflicto(f'La defensa ya fue evaluada ({evaluacion.estado})')
        if evaluacion.estado == 'BLOQUEADA':
            raise ErrorPrecondicion('La defensa está bloqueada hasta aprobar la defensa privada')

        participante.calificacion = nota
        participante.comentario = comentario
        participante.fecha_calificacion = timezone.now()
        participante.save(update_fields=['calificacion', 'comentario', 'fecha_calificacion'])

        notas = list(evaluacion.participantes.values_list('calificacion', flat=True))
        if notas and all(n is not None for n in notas):
            promedio = sum(notas) / len(notas)
            evaluacion.calificacion = redondear(promedio)
            evaluacion.fecha_evaluacion = timezone.now()
            evaluacion.estado = 'APROBADA' if promedio >= reglas.nota_aprobacion_defensa else 'RECHAZADA'
            evaluacion.save(update_fields=['calificacion', 'fecha_evaluacion', 'estado'])
            _aplicar_resultado(evaluacion)
            eventos.emitir(eventos.defensa_evaluada, sender=EvaluacionDefensa, evaluacion=evaluacion)
            logger.info(
                f"Defensa {evaluacion.tipo.lower()} {evaluacion.id} evaluada: "
                f"promedio {evaluacion.calificacion} -> {evaluacion.estado}"
            )

    return participante, evaluacion


def finalizar_defensa(usuario, evaluacion_id, estado, comentarios=None):
    """Cierre administrativo: fija APROBADA o RECHAZADA sin promediar."""
    exigir_personal(usuario, 'Solo directores y coordinadores pueden finalizar defensas')
    if estado not in EvaluacionDefensa.ESTADOS_FINALES:
        raise ErrorValidacion('El estado final debe ser APROBADA o RECHAZADA')

    with transaction.atomic():
        evaluacion = _bloquear_evaluacion(evaluacion_id)
        evaluacion.estado = estado
        evaluacion.comentarios = comentarios
        evaluacion.fecha_evaluacion = timezone.now()
        evaluacion.save(update_fields=['estado', 'comentarios', 'fecha_evaluacion'])
        _aplicar_resultado(evaluacion)
        eventos.emitir(eventos.defensa_evaluada, sender=EvaluacionDefensa, evaluacion=evaluacion)

    logger.info(f"Defensa {evaluacion.id} finalizada por {usuario.username}: {estado}")
    return evaluacion


def actualizar_programacion(usuario, evaluacion_id, **cambios):
    exigir_personal(usuario, 'Solo directores y coordinadores pueden reprogramar defensas')

    desconocidos = set(cambios) - set(CAMPOS_EDITABLES)
    if desconocidos:
        raise ErrorValidacion(f"Campos no editables: {', '.join(sorted(desconocidos))}")
    if 'estado' in cambios and cambios['estado'] not in ESTADOS_VALIDOS:
        raise ErrorValidacion(f"Estado inválido: {cambios['estado']}")
    if cambios.get('estado') in EvaluacionDefensa.ESTADOS_FINALES:
        raise ErrorValidacion(
            'APROBADA y RECHAZADA solo se fijan calificando o con el cierre administrativo (finalizar)'
        )

    with transaction.atomic():
        evaluacion = _bloquear_evaluacion(evaluacion_id)
        if evaluacion.finalizada and 'estado' in cambios and cambios['estado'] != evaluacion.estado:
            raise ErrorConflicto(f'La defensa ya fue evaluada ({evaluacion.estado}) y no puede reabrirse')

        modificados = [
            campo for campo in CAMPOS_PROGRAMACION
            if campo in cambios and getattr(evaluacion, campo) != cambios[campo]
        ]
        for campo, valor in cambios.items():
            setattr(evaluacion, campo, valor)
        if ('fecha_defensa' in modificados and 'estado' not in cambios and cambios['fecha_defensa']
                and not evaluacion.finalizada):
            evaluacion.estado = 'PROGRAMADA'

        evaluacion.save()
        if modificados:
            eventos.emitir(eventos.defensa_actualizada, sender=EvaluacionDefensa, evaluacion=evaluacion)

    logger.info(f"Defensa {evaluacion.id} actualizada por {usuario.username}: {', '.join(cambios) or 'sin cambios'}")
    return evaluacion


def puede_ver_evaluacion(usuario, evaluacion):
    if usuario.es_personal:
        return True
    if evaluacion.propuesta.estudiante_id == usuario.id:
        return True
    return evaluacion.participantes.filter(usuario=usuario).exists()


def obtener_detalle(usuario, evaluacion_id):
    evaluacion = obtener_evaluacion(evaluacion_id)
    if not puede_ver_evaluacion(usuario, evaluacion):
        raise ErrorAutorizacion('No tienes acceso a esta defensa')
    return evaluacion


def defensas_jurado(usuario):
    return (
        EvaluacionDefensa.objects
        .filter(participantes__usuario=usuario)
        .select_related('propuesta', 'propuesta__estudiante')
        .order_by('-fecha_creacion', '-id')
        .distinct()
    )


def defensas_propuesta(usuario, propuesta_id):
    propuesta = obtener_propuesta(propuesta_id)
    visibles = [d for d in propuesta.defensas.all() if puede_ver_evaluacion(usuario, d)]
    if not visibles and not usuario.es_personal and propuesta.estudiante_id != usuario.id:
        raise ErrorAutorizacion('No tienes acceso a las defensas de esta propuesta')
    return visibles


def comentarios_tribunal(usuario, evaluacion_id):
    evaluacion = obtener_detalle(usuario, evaluacion_id)
    return evaluacion.participantes.select_related('usuario').order_by('id')
