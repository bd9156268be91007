from rest_framework.response import Response
from rest_framework.views import APIView

from .etapas import reporte_progresion
from .servicios import puede_crear_propuesta, estado_desbloqueo
from apps.propuestas.servicios import obtener_propuesta, propuesta_del_estudiante, puede_ver_propuesta
from apps.usuarios.models import User, ROLES_PERSONAL
from titulacion.excepciones import ErrorAutorizacion, ErrorNoEncontrado


def _estudiante_consultado(request):
    estudiante_id = request.query_params.get('estudiante')
    if not estudiante_id or str(request.user.id) == estudiante_id:
        return request.user
    if request.user.role not in ROLES_PERSONAL:
        raise ErrorAutorizacion('Solo el personal de titulación puede consultar a otros estudiantes')
    estudiante = User.objects.filter(id=estudiante_id, role='ESTUDIANTE').first()
    if estudiante is None:
        raise ErrorNoEncontrado('Estudiante no encontrado')
    return estudiante


class PuedeCrearPropuestaView(APIView):

    def get(self, request):
        resultado = puede_crear_propuesta(_estudiante_consultado(request))
        return Response({
            'canCreate': resultado.puede_crear,
            'cumplidos': resultado.cumplidos,
            'totalRequisitos': resultado.total_requisitos,
            'message': resultado.mensaje,
        })


class EstadoDesbloqueoView(APIView):

    def get(self, request, propuesta_id=None):
        if propuesta_id is None:
            propuesta = propuesta_del_estudiante(request.user)
        else:
            propuesta = obtener_propuesta(propuesta_id)
            if not puede_ver_propuesta(request.user, propuesta):
                raise ErrorAutorizacion('No tienes acceso a esta propuesta')

        estado = estado_desbloqueo(propuesta)
        return Response({
            'propuesta_id': propuesta.id,
            'evidencias_aprobadas': estado.evidencias_aprobadas,
            'umbral_entregables': estado.umbral_entregables,
            'umbral_defensa': estado.umbral_defensa,
            'puede_subir_documentos': estado.puede_subir_documentos,
            'entregables_activos': estado.entregables_activos,
            'entregables_faltantes': estado.entregables_faltantes,
            'entregables_completos': estado.entregables_completos,
            'puede_defender': estado.puede_defender,
        })


class ReporteProgresionView(APIView):

    def get(self, request):
        estudiante = _estudiante_consultado(request)
        return Response({
            'estudiante_id': estudiante.id,
            'etapas': reporte_progresion(estudiante),
        })
