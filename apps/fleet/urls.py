"""URL routing for the car catalogue."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import CarViewSet

router = DefaultRouter()
router.register(r"cars", CarViewSet, basename="car")

urlpatterns = [
    path("", include(router.urls)),
]
