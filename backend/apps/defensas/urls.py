from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import EvaluacionDefensaViewSet

router = DefaultRouter()
router.register(r'', EvaluacionDefensaViewSet, basename='defensa')

urlpatterns = [
    path('', include(router.urls)),
]
