from django.urls import path

from modules.core.views import RootView, health_check

urlpatterns = [
    path("", RootView.as_view(), name="root"),
    path("health", health_check, name="health_check"),
]
