from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import PropuestaViewSet, VotacionTutorViewSet

router = DefaultRouter()
# Antes del prefijo vacío para que "votaciones/" no se lea como id de propuesta
router.register(r'votaciones', VotacionTutorViewSet, basename='votacion-tutor')
router.register(r'', PropuestaViewSet, basename='propuesta')

urlpatterns = [
    path('', include(router.urls)),
]
