from django.apps import AppConfig


class CelebrationsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.celebrations'
    verbose_name = 'Celebrations'

    def ready(self):
        from . import receivers  # noqa: F401
