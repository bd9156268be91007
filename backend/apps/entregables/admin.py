from django.contrib import admin
from .models import EntregableFinal


@admin.register(EntregableFinal)
class EntregableFinalAdmin(admin.ModelAdmin):
    list_display = ('propuesta', 'tipo', 'version', 'activo', 'fecha_subida')
    list_filter = ('tipo', 'activo')
