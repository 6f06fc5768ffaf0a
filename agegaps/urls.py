from django.urls import path
from . import views

urlpatterns = [
    path("", views.report_view, name="report"),
    path("download/", views.download_cleaned_csv, name="download_cleaned_csv"),
]
