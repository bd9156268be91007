from django.urls import path
from .views import EntregableFinalView

urlpatterns = [
    path('', EntregableFinalView.as_view(), name='entregables'),
    path('propuesta/<int:propuesta_id>/', EntregableFinalView.as_view(), name='entregables-propuesta'),
]
