from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import ActividadViewSet, EvidenciaViewSet, ResumenSemanalView, ResumenGeneralView

router = DefaultRouter()
router.register(r'actividades', ActividadViewSet, basename='actividad')
router.register(r'evidencias', EvidenciaViewSet, basename='evidencia')

urlpatterns = [
    path('resumen/', ResumenSemanalView.as_view(), name='resumen-propio'),
    path('resumen/general/', ResumenGeneralView.as_view(), name='resumen-general'),
    path('resumen/<int:propuesta_id>/', ResumenSemanalView.as_view(), name='resumen-propuesta'),
    path('', include(router.urls)),
]
