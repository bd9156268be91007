"""Reglas de negocio configurables del proceso de titulación."""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


@dataclass(frozen=True)
class ReglasTitulacion:
    ponderacion_tutor: Decimal
    ponderacion_docente: Decimal
    total_semanas: int = 16
    max_actividades_por_propuesta: int = 64
    umbral_evidencias_entregables: int = 16
    umbral_evidencias_defensa: int = 16
    nota_aprobacion_defensa: Decimal = Decimal('7.0')

    def __post_init__(self):
        for nombre in ('ponderacion_tutor', 'ponderacion_docente'):
            valor = getattr(self, nombre)
            if not (Decimal('0') <= valor <= Decimal('1')):
                raise ImproperlyConfigured(f"{nombre} debe estar entre 0 y 1 (recibido {valor})")

        if self.ponderacion_tutor + self.ponderacion_docente != Decimal('1'):
            raise ImproperlyConfigured(
                "Las ponderaciones de tutor y docente deben sumar 1.0 "
                f"(tutor={self.ponderacion_tutor}, docente={self.ponderacion_docente})"
            )

        if self.total_semanas < 1 or self.max_actividades_por_propuesta < 1:
            raise ImproperlyConfigured("TOTAL_SEMANAS y MAX_ACTIVIDADES_POR_PROPUESTA deben ser positivos")


def _decimal(valor, nombre):
    try:
        return Decimal(str(valor))
    except InvalidOperation:
        raise ImproperlyConfigured(f"TITULACION['{nombre}'] no es un número válido: {valor!r}")


def obtener_reglas():
    """Lee settings.TITULACION y devuelve las reglas validadas."""
    config = getattr(settings, 'TITULACION', {})
    return ReglasTitulacion(
        ponderacion_tutor=_decimal(config.get('PONDERACION_TUTOR', '0.50'), 'PONDERACION_TUTOR'),
        ponderacion_docente=_decimal(config.get('PONDERACION_DOCENTE', '0.50'), 'PONDERACION_DOCENTE'),
        total_semanas=int(config.get('TOTAL_SEMANAS', 16)),
        max_actividades_por_propuesta=int(config.get('MAX_ACTIVIDADES_POR_PROPUESTA', 64)),
        umbral_evidencias_entregables=int(config.get('UMBRAL_EVIDENCIAS_ENTREGABLES', 16)),
        umbral_evidencias_defensa=int(config.get('UMBRAL_EVIDENCIAS_DEFENSA', 16)),
        nota_aprobacion_defensa=_decimal(config.get('NOTA_APROBACION_DEFENSA', '7.0'), 'NOTA_APROBACION_DEFENSA'),
    )
