from django.apps import AppConfig  # type: ignore


class VendorsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.vendors"
    label = "vendors"
    verbose_name = "Vendor applications"

    def ready(self) -> None:
        from .handlers import register

        register()
