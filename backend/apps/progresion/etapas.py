"""
Cadena de etapas del proceso de titulación.

Prerrequisitos -> Propuesta -> Evidencias -> Entregables -> Defensa privada
-> Defensa pública -> Resultado. Una etapa queda habilitada solo cuando todas
las anteriores están cumplidas.
"""
from dataclasses import dataclass

from .servicios import puede_crear_propuesta, estado_desbloqueo
from apps.propuestas.models import Propuesta


@dataclass
class ContextoProgresion:
    estudiante: object
    propuesta: object = None
    desbloqueo: object = None
    defensa_privada: object = None
    defensa_publica: object = None

    @classmethod
    def para(cls, estudiante):
        propuesta = Propuesta.objects.filter(estudiante=estudiante).first()
        if propuesta is None:
            return cls(estudiante=estudiante)

        defensas = {d.tipo: d for d in propuesta.defensas.all()}
        return cls(
            estudiante=estudiante,
            propuesta=propuesta,
            desbloqueo=estado_desbloqueo(propuesta),
            defensa_privada=defensas.get('PRIVADA'),
            defensa_publica=defensas.get('PUBLICA'),
        )


class Etapa:
    clave = None
    nombre = None

    def esta_cumplida(self, contexto):
        raise NotImplementedError


class EtapaPrerequisitos(Etapa):
    clave = 'PREREQUISITOS'
    nombre = 'Prerrequisitos'

    def esta_cumplida(self, contexto):
        return puede_crear_propuesta(contexto.estudiante).puede_crear


class EtapaPropuesta(Etapa):
    clave = 'PROPUESTA'
    nombre = 'Propuesta aprobada'

    def esta_cumplida(self, contexto):
        return contexto.propuesta is not None and contexto.propuesta.aprobada


class EtapaEvidencias(Etapa):
    clave = 'EVIDENCIAS'
    nombre = 'Evidencias semanales'

    def esta_cumplida(self, contexto):
        return contexto.desbloqueo is not None and contexto.desbloqueo.puede_subir_documentos


class EtapaEntregables(Etapa):
    clave = 'ENTREGABLES'
    nombre = 'Documentos finales'

    def esta_cumplida(self, contexto):
        return contexto.desbloqueo is not None and contexto.desbloqueo.puede_defender


class EtapaDefensaPrivada(Etapa):
    clave = 'DEFENSA_PRIVADA'
    nombre = 'Defensa privada'

    def esta_cumplida(self, contexto):
        return contexto.defensa_privada is not None and contexto.defensa_privada.estado == 'APROBADA'


class EtapaDefensaPublica(Etapa):
    clave = 'DEFENSA_PUBLICA'
    nombre = 'Defensa pública'

    def esta_cumplida(self, contexto):
        return contexto.defensa_publica is not None and contexto.defensa_publica.finalizada


class EtapaResultado(Etapa):
    clave = 'RESULTADO'
    nombre = 'Resultado de titulación'

    def esta_cumplida(self, contexto):
        return contexto.propuesta is not None and contexto.propuesta.resultado_defensa is not None


CADENA_ETAPAS = (
    EtapaPrerequisitos(),
    EtapaPropuesta(),
    EtapaEvidencias(),
    EtapaEntregables(),
    EtapaDefensaPrivada(),
    EtapaDefensaPublica(),
    EtapaResultado(),
)


def reporte_progresion(estudiante, etapas=CADENA_ETAPAS):
    contexto = ContextoProgresion.para(estudiante)
    reporte = []
    anteriores_cumplidas = True

    for etapa in etapas:
        cumplida = etapa.esta_cumplida(contexto)
        reporte.append({
            'etapa': etapa.clave,
            'nombre': etapa.nombre,
            'cumplida': cumplida,
            'habilitada': anteriores_cumplidas,
        })
        anteriores_cumplidas = anteriores_cumplidas and cumplida

    return reporte
