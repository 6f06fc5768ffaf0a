from django.apps import AppConfig


class AgeGapsConfig(AppConfig):
    name = "agegaps"
    verbose_name = "Hollywood age gaps"
