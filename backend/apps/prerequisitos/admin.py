from django.contrib import admin
from .models import CatalogoPrerequisito, EstudiantePrerequisito


@admin.register(CatalogoPrerequisito)
class CatalogoPrerequisitoAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'orden', 'activo')
    list_filter = ('activo',)


@admin.register(EstudiantePrerequisito)
class EstudiantePrerequisitoAdmin(admin.ModelAdmin):
    list_display = ('estudiante', 'prerequisito', 'cumplido', 'fecha_cumplimiento')
    list_filter = ('cumplido', 'prerequisito')
