"""
Eventos de dominio emitidos por el motor de titulación.

Los servicios solo emiten eventos; la entrega (notificación interna y correo)
ocurre en `receptores.py` después de confirmar la transacción. Un fallo en la
entrega se registra en el log y nunca revierte el cambio de estado.
"""
import logging

from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)

propuesta_revisada = Signal()        # propuesta, revisor
tutor_asignado = Signal()            # trabajo
actividad_creada = Signal()          # actividad
evidencia_entregada = Signal()       # evidencia, estudiante
evidencia_calificada = Signal()      # evidencia, calificador, pista
defensa_programada = Signal()        # evaluacion
defensa_actualizada = Signal()       # evaluacion
participante_asignado = Signal()     # participante
defensa_evaluada = Signal()          # evaluacion
defensa_desbloqueada = Signal()      # evaluacion (la pública que pasa a PENDIENTE)


def _entregar(senal, sender, kwargs):
    for receptor, resultado in senal.send_robust(sender=sender, **kwargs):
        if isinstance(resultado, Exception):
            logger.warning(
                f"Entrega fallida en {getattr(receptor, '__name__', receptor)}: {resultado}",
                exc_info=(type(resultado), resultado, resultado.__traceback__),
            )


def emitir(senal, sender, **kwargs):
    """Programa el envío del evento para cuando la transacción actual se confirme."""
    transaction.on_commit(lambda: _entregar(senal, sender, kwargs))
