from django.apps import AppConfig


class SystemConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "src.system"
    label = "system"
    verbose_name = "System settings & audit"
