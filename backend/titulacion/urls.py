"""
URL configuration for titulacion project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/usuarios/', include('apps.usuarios.urls')),
    path('api/prerequisitos/', include('apps.prerequisitos.urls')),
    path('api/propuestas/', include('apps.propuestas.urls')),
    path('api/actividades/', include('apps.actividades.urls')),
    path('api/entregables/', include('apps.entregables.urls')),
    path('api/defensas/', include('apps.defensas.urls')),
    path('api/progresion/', include('apps.progresion.urls')),
    path('api/notificaciones/', include('notificaciones.urls')),
]
