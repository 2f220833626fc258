from django.apps import AppConfig


class CommsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.comms'
    label = 'comms'
    verbose_name = 'Notifications'
