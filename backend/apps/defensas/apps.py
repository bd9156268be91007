from django.apps import AppConfig


class DefensasConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.defensas'
    verbose_name = 'Defensas'
