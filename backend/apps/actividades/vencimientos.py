"""
Registro automático de ceros para actividades vencidas sin entrega.

No hay tareas programadas: se ejecuta al listar las actividades o evidencias
de una propuesta. Es idempotente; una actividad recibe como máximo una
evidencia automática.
"""
import logging

from django.db import transaction, IntegrityError
from django.utils import timezone

from .models import Actividad, Evidencia
from titulacion.configuracion import obtener_reglas

logger = logging.getLogger(__name__)

FEEDBACK_SIN_ENTREGA = 'No se registró entrega en el plazo establecido.'


def aplicar_ceros_vencidos(propuesta, ahora=None):
    """Devuelve la lista de evidencias automáticas creadas en esta llamada."""
    ahora = ahora or timezone.now()
    reglas = obtener_reglas()
    creadas = []

    with transaction.atomic():
        actividades = list(
            Actividad.objects.select_for_update().filter(propuesta=propuesta).order_by('id')
        )
        con_evidencia = set(
            Evidencia.objects
            .filter(actividad__in=[a.id for a in actividades])
            .values_list('actividad_id', flat=True)
        )

        for posicion, actividad in enumerate(actividades, start=1):
            if actividad.fecha_entrega is None or actividad.fecha_entrega >= ahora:
                continue
            if actividad.id in con_evidencia:
                continue

            evidencia = Evidencia(
                actividad=actividad,
                semana=actividad.semana or min(posicion, reglas.total_semanas),
                estado='NO_ENTREGADO',
                calificacion_tutor=0,
                feedback_tutor=FEEDBACK_SIN_ENTREGA,
                estado_revision_tutor='APROBADO',
                fecha_revision_tutor=ahora,
                ponderacion_tutor=reglas.ponderacion_tutor,
                ponderacion_docente=reglas.ponderacion_docente,
                es_automatica=True,
            )
            evidencia.recalcular_nota_final()
            try:
                with transaction.atomic():
                    evidencia.save()
            except IntegrityError:
                logger.warning(f"Evidencia automática de la actividad {actividad.id} ya registrada, se omite")
                continue

            if actividad.estado != 'NO_ENTREGADO':
                actividad.estado = 'NO_ENTREGADO'
                actividad.save(update_fields=['estado'])

            creadas.append(evidencia)
            logger.info(
                f"Cero automático registrado para actividad {actividad.id} "
                f"(semana {evidencia.semana}) de la propuesta {propuesta.id}"
            )

    return creadas
