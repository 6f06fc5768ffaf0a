from django.urls import include, path

urlpatterns = [
    path("", include("agegaps.urls")),
]
