from django.urls import path
from .views import PuedeCrearPropuestaView, EstadoDesbloqueoView, ReporteProgresionView

urlpatterns = [
    path('puede-crear-propuesta/', PuedeCrearPropuestaView.as_view(), name='puede-crear-propuesta'),
    path('desbloqueo/', EstadoDesbloqueoView.as_view(), name='desbloqueo-propio'),
    path('desbloqueo/<int:propuesta_id>/', EstadoDesbloqueoView.as_view(), name='desbloqueo-propuesta'),
    path('etapas/', ReporteProgresionView.as_view(), name='etapas'),
]
