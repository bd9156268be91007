"""
Puerta de progresión: decide si el estudiante puede pasar a la siguiente etapa
(crear propuesta, subir documentos finales, presentarse a defensa).
"""
import logging
from dataclasses import dataclass, field
from typing import List

from apps.actividades.models import Evidencia
from apps.entregables.models import EntregableFinal
from apps.prerequisitos.models import CatalogoPrerequisito, EstudiantePrerequisito
from titulacion.configuracion import obtener_reglas
from titulacion.excepciones import ErrorPrecondicion

logger = logging.getLogger(__name__)

TIPOS_ENTREGABLES_REQUERIDOS = ('TESIS', 'MANUAL_USUARIO', 'ARTICULO')


@dataclass(frozen=True)
class ResultadoPrerequisitos:
    puede_crear: bool
    cumplidos: int
    total_requisitos: int

    @property
    def faltantes(self):
        return max(self.total_requisitos - self.cumplidos, 0)

    @property
    def mensaje(self):
        if self.puede_crear:
            return 'Puedes crear tu propuesta'
        if self.total_requisitos == 0:
            return 'No hay prerrequisitos activos configurados'
        return f'Te faltan {self.faltantes} prerrequisito(s) por cumplir'


@dataclass(frozen=True)
class EstadoDesbloqueo:
    evidencias_aprobadas: int
    umbral_entregables: int
    umbral_defensa: int
    entregables_activos: List[str] = field(default_factory=list)

    @property
    def puede_subir_documentos(self):
        return self.evidencias_aprobadas >= self.umbral_entregables

    @property
    def entregables_faltantes(self):
        return [tipo for tipo in TIPOS_ENTREGABLES_REQUERIDOS if tipo not in self.entregables_activos]

    @property
    def entregables_completos(self):
        return not self.entregables_faltantes

    @property
    def puede_defender(self):
        return self.evidencias_aprobadas >= self.umbral_defensa and self.entregables_completos


def puede_crear_propuesta(estudiante):
    """
    El estudiante puede crear su propuesta cuando el personal validó todos los
    prerrequisitos activos del catálogo (y existe al menos uno).
    """
    total = CatalogoPrerequisito.objects.filter(activo=True).count()
    cumplidos = EstudiantePrerequisito.objects.filter(
        estudiante=estudiante,
        cumplido=True,
        prerequisito__activo=True,
    ).count()
    return ResultadoPrerequisitos(
        puede_crear=total > 0 and cumplidos == total,
        cumplidos=cumplidos,
        total_requisitos=total,
    )


def contar_evidencias_aprobadas(propuesta):
    return Evidencia.objects.filter(
        actividad__propuesta=propuesta,
        estado_revision_tutor='APROBADO',
    ).count()


def estado_desbloqueo(propuesta):
    reglas = obtener_reglas()
    tipos = (
        EntregableFinal.objects
        .filter(propuesta=propuesta, activo=True)
        .values_list('tipo', flat=True)
        .distinct()
    )
    return EstadoDesbloqueo(
        evidencias_aprobadas=contar_evidencias_aprobadas(propuesta),
        umbral_entregables=reglas.umbral_evidencias_entregables,
        umbral_defensa=reglas.umbral_evidencias_defensa,
        entregables_activos=sorted(tipos),
    )


def exigir_carga_documentos(propuesta):
    estado = estado_desbloqueo(propuesta)
    if not estado.puede_subir_documentos:
        logger.info(
            f"Carga de documentos bloqueada para propuesta {propuesta.id}: "
            f"{estado.evidencias_aprobadas}/{estado.umbral_entregables} evidencias aprobadas"
        )
        raise ErrorPrecondicion(
            f'Necesitas {estado.umbral_entregables} evidencias aprobadas por tu tutor para subir los documentos finales',
            extra={'evidenciasAprobadas': estado.evidencias_aprobadas, 'requeridas': estado.umbral_entregables}
        )
    return estado


def exigir_elegibilidad_defensa(propuesta):
    estado = estado_desbloqueo(propuesta)
    if not estado.puede_defender:
        raise ErrorPrecondicion(
            'El estudiante aún no cumple los requisitos para la defensa',
            extra={
                'evidenciasAprobadas': estado.evidencias_aprobadas,
                'requeridas': estado.umbral_defensa,
                'entregablesFaltantes': estado.entregables_faltantes,
            }
        )
    return estado
