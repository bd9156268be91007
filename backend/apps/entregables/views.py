from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import EntregableFinalSerializer, SubirEntregableSerializer
from .servicios import subir_entregable, listar_entregables


class EntregableFinalView(APIView):
    """
    GET: documentos finales activos (todas las versiones con ?history=true).
    POST: sube una nueva versión de un documento.
    """

    def get(self, request, propuesta_id=None):
        historial = request.query_params.get('history', '').lower() == 'true'
        entregables = listar_entregables(request.user, propuesta_id, historial=historial)
        return Response(EntregableFinalSerializer(entregables, many=True).data)

    def post(self, request, propuesta_id=None):
        datos = SubirEntregableSerializer(data=request.data)
        datos.is_valid(raise_exception=True)

        entregable = subir_entregable(
            request.user,
            datos.validated_data['tipo'],
            datos.validated_data['archivo_url'],
        )
        return Response(EntregableFinalSerializer(entregable).data, status=status.HTTP_201_CREATED)
