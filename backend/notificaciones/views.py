from django.utils import timezone
from rest_framework import viewsets, mixins
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Notificacion
from .serializers import NotificacionSerializer, NotificacionListSerializer


class NotificacionViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          mixins.DestroyModelMixin,
                          viewsets.GenericViewSet):
    """
    Bandeja de notificaciones del usuario autenticado.
    Las notificaciones las crea el motor de titulación; aquí solo se leen,
    marcan, archivan o eliminan.
    """
    serializer_class = NotificacionSerializer

    def get_queryset(self):
        queryset = Notificacion.objects.filter(usuario=self.request.user)

        if self.action == 'list':
            estado = self.request.query_params.get('estado')
            if estado:
                queryset = queryset.filter(estado=estado)
            tipo = self.request.query_params.get('tipo')
            if tipo:
                queryset = queryset.filter(tipo=tipo)
        return queryset

    def get_serializer_class(self):
        if self.action == 'list':
            return NotificacionListSerializer
        return NotificacionSerializer

    @action(detail=True, methods=['post'])
    def marcar_como_leida(self, request, pk=None):
        notificacion = self.get_object()
        notificacion.marcar_como_leida()
        return Response(NotificacionSerializer(notificacion).data)

    @action(detail=True, methods=['post'])
    def archivar(self, request, pk=None):
        notificacion = self.get_object()
        notificacion.archivar()
        return Response(NotificacionSerializer(notificacion).data)

    @action(detail=False, methods=['post'])
    def marcar_todas_como_leidas(self, request):
        actualizadas = self.get_queryset().filter(estado='NO_LEIDA').update(
            estado='LEIDA',
            fecha_lectura=timezone.now()
        )
        return Response({'actualizadas': actualizadas})

    @action(detail=False, methods=['get'])
    def no_leidas(self, request):
        return Response({'count': self.get_queryset().filter(estado='NO_LEIDA').count()})
