"""URL routing for payments."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import PaymentViewSet, RentalPaymentsView, SlipUploadView, VerifyPaymentView

router = DefaultRouter()
router.register(r"payments", PaymentViewSet, basename="payment")

urlpatterns = [
    path("rentals/<int:rental_id>/upload-slip/", SlipUploadView.as_view(), name="rental-upload-slip"),
    path("rentals/<int:rental_id>/payments/", RentalPaymentsView.as_view(), name="rental-payments"),
    path("rentals/<int:rental_id>/verify-payment/", VerifyPaymentView.as_view(), name="rental-verify-payment"),
    path("", include(router.urls)),
]
