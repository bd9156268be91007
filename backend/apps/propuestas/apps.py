from django.apps import AppConfig


class PropuestasConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.propuestas'
    verbose_name = 'Propuestas'
