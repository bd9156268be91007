from django.contrib import admin

from .models import Notificacion


@admin.register(Notificacion)
class NotificacionAdmin(admin.ModelAdmin):
    list_display = ('titulo', 'usuario', 'tipo', 'evento', 'estado', 'fecha_creacion')
    list_filter = ('tipo', 'estado')
    search_fields = ('titulo', 'usuario__username')
