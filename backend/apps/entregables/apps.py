from django.apps import AppConfig


class EntregablesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.entregables'
    verbose_name = 'Entregables finales'
