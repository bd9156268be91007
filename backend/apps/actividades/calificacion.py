"""
Cálculo de la nota final de una evidencia a partir de sus dos pistas de revisión.

Cada pista (tutor y docente de integración) está sin calificar o calificada con
una nota entre 0 y 10. La nota final solo existe cuando ambas pistas están
calificadas.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

NOTA_MINIMA = Decimal('0')
NOTA_MAXIMA = Decimal('10')
DOS_DECIMALES = Decimal('0.01')


@dataclass(frozen=True)
class SinCalificar:
    pass


@dataclass(frozen=True)
class Calificada:
    nota: Decimal

    def __post_init__(self):
        if not (NOTA_MINIMA <= self.nota <= NOTA_MAXIMA):
            raise ValueError(f"La nota debe estar entre 0 y 10 (recibido {self.nota})")


def pista(valor):
    """Convierte un valor almacenado (None o número) en el estado de la pista."""
    if valor is None:
        return SinCalificar()
    return Calificada(Decimal(str(valor)))


def redondear(valor):
    return Decimal(valor).quantize(DOS_DECIMALES, rounding=ROUND_HALF_UP)


def calcular_nota_final(tutor, docente, ponderacion_tutor, ponderacion_docente):
    """
    Devuelve la nota ponderada redondeada a 2 decimales, o None si alguna
    pista está sin calificar.
    """
    if isinstance(tutor, Calificada) and isinstance(docente, Calificada):
        return redondear(
            tutor.nota * Decimal(str(ponderacion_tutor)) +
            docente.nota * Decimal(str(ponderacion_docente))
        )
    return None
