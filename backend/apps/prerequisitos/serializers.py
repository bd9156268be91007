from rest_framework import serializers
from .models import CatalogoPrerequisito, EstudiantePrerequisito
from apps.usuarios.serializers import UserBasicInfoSerializer


class CatalogoPrerequisitoSerializer(serializers.ModelSerializer):

    class Meta:
        model = CatalogoPrerequisito
        fields = ['id', 'nombre', 'descripcion', 'orden', 'activo']


class EstudiantePrerequisitoSerializer(serializers.ModelSerializer):
    prerequisito_detail = CatalogoPrerequisitoSerializer(source='prerequisito', read_only=True)
    estudiante_detail = UserBasicInfoSerializer(source='estudiante', read_only=True)

    class Meta:
        model = EstudiantePrerequisito
        fields = ['id', 'estudiante', 'prerequisito', 'archivo_url', 'cumplido', 'fecha_cumplimiento',
                  'fecha_registro', 'prerequisito_detail', 'estudiante_detail']
        read_only_fields = ['estudiante', 'cumplido', 'fecha_cumplimiento', 'fecha_registro']


class SubirPrerequisitoSerializer(serializers.Serializer):
    prerequisito = serializers.IntegerField()
    archivo_url = serializers.CharField(max_length=500)


class ValidarPrerequisitoSerializer(serializers.Serializer):
    cumplido = serializers.BooleanField()
