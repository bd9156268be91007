from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import CatalogoPrerequisitoViewSet, EstudiantePrerequisitoViewSet

router = DefaultRouter()
router.register(r'catalogo', CatalogoPrerequisitoViewSet, basename='catalogo-prerequisito')
router.register(r'cumplimientos', EstudiantePrerequisitoViewSet, basename='estudiante-prerequisito')

urlpatterns = [
    path('', include(router.urls)),
]
