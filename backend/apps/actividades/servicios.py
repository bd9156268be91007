import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone

from .calificacion import NOTA_MAXIMA, NOTA_MINIMA, redondear
from .models import Actividad, Evidencia, Comentario
from .vencimientos import aplicar_ceros_vencidos
from apps.propuestas.models import Propuesta
from apps.propuestas.servicios import obtener_propuesta, puede_ver_propuesta, es_tutor_de
from apps.usuarios.models import ROLES_CALIFICADORES, ROLES_PERSONAL
from apps.usuarios.permissions import exigir_rol
from notificaciones import eventos
from titulacion.configuracion import obtener_reglas
from titulacion.excepciones import ErrorAutorizacion, ErrorNoEncontrado, ErrorValidacion

logger = logging.getLogger(__name__)

ROLES_CREAN_ACTIVIDADES = ('TUTOR', 'DOCENTE_INTEGRACION') + ROLES_PERSONAL
ROL_POR_PISTA = dict(zip(('TUTOR', 'DOCENTE'), ROLES_CALIFICADORES))
ESTADOS_REVISION = ('PENDIENTE', 'APROBADO', 'RECHAZADO')


def validar_semana(semana):
    total = obtener_reglas().total_semanas
    try:
        semana = int(semana)
    except (TypeError, ValueError):
        raise ErrorValidacion(f'La semana debe ser un número entre 1 y {total}')
    if not 1 <= semana <= total:
        raise ErrorValidacion(f'La semana debe estar entre 1 y {total}')
    return semana


def validar_nota(valor, requerida=False):
    if valor is None or valor == '':
        if requerida:
            raise ErrorValidacion('La calificación es obligatoria')
        return None
    try:
        nota = Decimal(str(valor))
    except InvalidOperation:
        raise ErrorValidacion('La calificación debe ser numérica')
    if not nota.is_finite() or not NOTA_MINIMA <= nota <= NOTA_MAXIMA:
        raise ErrorValidacion('La calificación debe estar entre 0 y 10')
    return redondear(nota)


def obtener_actividad(actividad_id):
    try:
        return Actividad.objects.select_related('propuesta', 'propuesta__estudiante').get(id=actividad_id)
    except Actividad.DoesNotExist:
        raise ErrorNoEncontrado('Actividad no encontrada')


def exigir_acceso_propuesta(usuario, propuesta):
    if not puede_ver_propuesta(usuario, propuesta):
        raise ErrorAutorizacion('No tienes acceso a esta propuesta')


def crear_actividad(usuario, propuesta_id, nombre, tipo='TUTORIA', descripcion=None, semana=None,
                    fecha_activacion=None, fecha_entrega=None, requisitos=None):
    exigir_rol(usuario, ROLES_CREAN_ACTIVIDADES, 'No tienes permiso para crear actividades')
    if semana is not None:
        semana = validar_semana(semana)

    reglas = obtener_reglas()

    with transaction.atomic():
        propuesta = Propuesta.objects.select_for_update().filter(id=propuesta_id).first()
        if propuesta is None:
            raise ErrorNoEncontrado('Propuesta no encontrada')
        if usuario.role == 'TUTOR' and not es_tutor_de(usuario, propuesta):
            raise ErrorAutorizacion('Solo el tutor asignado puede crear actividades en esta propuesta')

        if propuesta.actividades.count() >= reglas.max_actividades_por_propuesta:
            raise ErrorValidacion(
                f'La propuesta ya tiene el máximo de {reglas.max_actividades_por_propuesta} actividades'
            )

        actividad = Actividad.objects.create(
            propuesta=propuesta,
            nombre=nombre,
            tipo=tipo,
            descripcion=descripcion,
            semana=semana,
            fecha_activacion=fecha_activacion,
            fecha_entrega=fecha_entrega,
            requisitos=requisitos or [],
            creado_por=usuario,
        )
        eventos.emitir(eventos.actividad_creada, sender=Actividad, actividad=actividad)

    logger.info(f"Actividad {actividad.id} creada en propuesta {propuesta.id} por {usuario.username}")
    return actividad


def listar_actividades_propuesta(usuario, propuesta_id):
    propuesta = obtener_propuesta(propuesta_id)
    exigir_acceso_propuesta(usuario, propuesta)
    aplicar_ceros_vencidos(propuesta)
    return Actividad.objects.filter(propuesta=propuesta).order_by('id')


def listar_evidencias_actividad(usuario, actividad_id):
    actividad = obtener_actividad(actividad_id)
    exigir_acceso_propuesta(usuario, actividad.propuesta)
    aplicar_ceros_vencidos(actividad.propuesta)
    return (
        Evidencia.objects
        .filter(actividad_id=actividad.id)
        .prefetch_related('comentarios__autor')
        .order_by('semana', 'id')
    )


def entregar_evidencia(estudiante, actividad_id, semana, contenido, archivo_url=None):
    semana = validar_semana(semana)
    actividad = obtener_actividad(actividad_id)

    if estudiante.role != 'ESTUDIANTE' or actividad.propuesta.estudiante_id != estudiante.id:
        raise ErrorAutorizacion('Solo el estudiante dueño de la propuesta puede entregar evidencias')

    reglas = obtener_reglas()

    with transaction.atomic():
        evidencia = Evidencia.objects.create(
            actividad=actividad,
            semana=semana,
            contenido=contenido or '',
            archivo_url=archivo_url,
            estado='ENTREGADO',
            fecha_entrega=timezone.now(),
            ponderacion_tutor=reglas.ponderacion_tutor,
            ponderacion_docente=reglas.ponderacion_docente,
        )
        if contenido:
            Comentario.objects.create(evidencia=evidencia, autor=estudiante, texto=contenido)

        Actividad.objects.filter(id=actividad.id).update(estado='ENTREGADO')
        eventos.emitir(eventos.evidencia_entregada, sender=Evidencia, evidencia=evidencia, estudiante=estudiante)

    logger.info(f"Evidencia {evidencia.id} (semana {semana}) entregada por {estudiante.username}")
    return evidencia


def _calificar(usuario, evidencia_id, calificacion, feedback, pista):
    exigir_rol(
        usuario,
        (ROL_POR_PISTA[pista],),
        f'Solo el rol {ROL_POR_PISTA[pista]} puede calificar esta pista'
    )
    nota = validar_nota(calificacion)
    ahora = timezone.now()

    with transaction.atomic():
        evidencia = Evidencia.objects.select_for_update().filter(id=evidencia_id).first()
        if evidencia is None:
            raise ErrorNoEncontrado('Evidencia no encontrada')

        campo = pista.lower()
        setattr(evidencia, f'calificacion_{campo}', nota)
        setattr(evidencia, f'feedback_{campo}', feedback)
        setattr(evidencia, f'estado_revision_{campo}', 'APROBADO' if nota is not None else 'PENDIENTE')
        setattr(evidencia, f'fecha_revision_{campo}', ahora)
        evidencia.recalcular_nota_final()
        evidencia.save(update_fields=[
            f'calificacion_{campo}',
            f'feedback_{campo}',
            f'estado_revision_{campo}',
            f'fecha_revision_{campo}',
            'calificacion_final',
        ])

        if feedback:
            Comentario.objects.create(evidencia=evidencia, autor=usuario, texto=feedback)

        eventos.emitir(
            eventos.evidencia_calificada,
            sender=Evidencia,
            evidencia=evidencia,
            calificador=usuario,
            pista=pista,
        )

    logger.info(
        f"Evidencia {evidencia.id} calificada ({pista}) por {usuario.username}: "
        f"{nota}, nota final {evidencia.calificacion_final}"
    )
    return evidencia


def calificar_tutor(usuario, evidencia_id, calificacion, feedback=None):
    return _calificar(usuario, evidencia_id, calificacion, feedback, 'TUTOR')


def calificar_docente(usuario, evidencia_id, calificacion, feedback=None):
    return _calificar(usuario, evidencia_id, calificacion, feedback, 'DOCENTE')


def actualizar_estado_revision(usuario, evidencia_id, estado, comentario=None):
    """El tutor o el docente fija explícitamente el estado de revisión de su propia pista."""
    exigir_rol(usuario, ROLES_CALIFICADORES, 'Solo tutores y docentes pueden revisar evidencias')
    if estado not in ESTADOS_REVISION:
        raise ErrorValidacion(f'Estado de revisión inválido: {estado}')

    campo = 'tutor' if usuario.role == 'TUTOR' else 'docente'

    with transaction.atomic():
        evidencia = Evidencia.objects.select_for_update().filter(id=evidencia_id).first()
        if evidencia is None:
            raise ErrorNoEncontrado('Evidencia no encontrada')

        setattr(evidencia, f'estado_revision_{campo}', estado)
        setattr(evidencia, f'fecha_revision_{campo}', timezone.now())
        evidencia.save(update_fields=[f'estado_revision_{campo}', f'fecha_revision_{campo}'])

        if comentario:
            Comentario.objects.create(evidencia=evidencia, autor=usuario, texto=comentario)

    logger.info(f"Evidencia {evidencia.id}: revisión de {campo} marcada {estado} por {usuario.username}")
    return evidencia


def agregar_comentario(usuario, evidencia_id, texto):
    evidencia = Evidencia.objects.select_related('actividad__propuesta').filter(id=evidencia_id).first()
    if evidencia is None:
        raise ErrorNoEncontrado('Evidencia no encontrada')
    exigir_acceso_propuesta(usuario, evidencia.actividad.propuesta)
    if not texto:
        raise ErrorValidacion('El comentario no puede estar vacío')
    return Comentario.objects.create(evidencia=evidencia, autor=usuario, texto=texto)


def _resumen_propuesta(propuesta):
    total = obtener_reglas().total_semanas
    semanas = [
        {'semana': numero, 'calificacion': None, 'evidencia_id': None, 'evidencias': []}
        for numero in range(1, total + 1)
    ]
    notas_docente = []

    evidencias = (
        Evidencia.objects
        .filter(actividad__propuesta=propuesta)
        .select_related('actividad')
        .order_by('actividad_id', 'id')
    )
    for evidencia in evidencias:
        if evidencia.calificacion_docente is not None:
            notas_docente.append(evidencia.calificacion_docente)
        if not 1 <= evidencia.semana <= total:
            continue

        slot = semanas[evidencia.semana - 1]
        if not slot['evidencias']:
            slot['calificacion'] = evidencia.calificacion_docente
            slot['evidencia_id'] = evidencia.id
        slot['evidencias'].append({
            'id': evidencia.id,
            'actividad': evidencia.actividad.nombre,
            'estado': evidencia.estado,
            'calificacion_tutor': evidencia.calificacion_tutor,
            'calificacion_docente': evidencia.calificacion_docente,
            'calificacion_final': evidencia.calificacion_final,
            'es_automatica': evidencia.es_automatica,
        })

    promedio = redondear(sum(notas_docente) / len(notas_docente)) if notas_docente else Decimal('0.00')

    return {
        'propuesta_id': propuesta.id,
        'estudiante_id': propuesta.estudiante_id,
        'estudiante': propuesta.estudiante.nombre_completo,
        'semanas': semanas,
        'promedio': f'{promedio:.2f}',
    }


def resumen_semanal(usuario, propuesta_id):
    propuesta = obtener_propuesta(propuesta_id)
    exigir_acceso_propuesta(usuario, propuesta)
    return _resumen_propuesta(propuesta)


def resumen_semanal_todos(usuario):
    exigir_rol(
        usuario,
        ('DOCENTE_INTEGRACION',) + ROLES_PERSONAL,
        'Solo docentes de integración y personal de titulación pueden ver el resumen general'
    )
    propuestas = Propuesta.objects.select_related('estudiante').order_by('estudiante__last_name', 'id')
    return [_resumen_propuesta(propuesta) for propuesta in propuestas]
