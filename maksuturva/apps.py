from django.apps import AppConfig


class MaksuturvaConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "maksuturva"
    verbose_name = "Maksuturva payments"
