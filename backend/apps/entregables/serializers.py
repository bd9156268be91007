from rest_framework import serializers
from .models import EntregableFinal


class EntregableFinalSerializer(serializers.ModelSerializer):
    tipo_display = serializers.CharField(source='get_tipo_display', read_only=True)

    class Meta:
        model = EntregableFinal
        fields = ['id', 'propuesta', 'tipo', 'tipo_display', 'archivo_url', 'version', 'activo', 'fecha_subida']
        read_only_fields = fields


class SubirEntregableSerializer(serializers.Serializer):
    tipo = serializers.ChoiceField(choices=EntregableFinal.TIPO_CHOICES)
    archivo_url = serializers.CharField(max_length=500)
