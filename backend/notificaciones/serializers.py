from rest_framework import serializers
from .models import Notificacion


class NotificacionSerializer(serializers.ModelSerializer):
    estado_display = serializers.CharField(source='get_estado_display', read_only=True)
    tipo_display = serializers.CharField(source='get_tipo_display', read_only=True)

    class Meta:
        model = Notificacion
        fields = [
            'id', 'titulo', 'mensaje', 'tipo', 'tipo_display', 'evento',
            'estado', 'estado_display', 'fecha_creacion', 'fecha_lectura', 'url_accion'
        ]
        read_only_fields = fields


class NotificacionListSerializer(serializers.ModelSerializer):
    """Versión compacta para la bandeja de entrada"""
    tipo_display = serializers.CharField(source='get_tipo_display', read_only=True)

    class Meta:
        model = Notificacion
        fields = ['id', 'titulo', 'tipo', 'tipo_display', 'estado', 'fecha_creacion', 'url_accion']
