from django.apps import AppConfig


class PrerequisitosConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.prerequisitos'
    verbose_name = 'Prerrequisitos'
