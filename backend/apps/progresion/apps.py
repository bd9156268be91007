from django.apps import AppConfig


class ProgresionConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.progresion'
    verbose_name = 'Progresión'
