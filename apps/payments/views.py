"""API views for payment reconciliation.

Slip uploads come from customers; recording and verifying payments is
staff work. The uploaded file is stored first and its name handed to the
core as an opaque reference; it is deleted again if the core refuses.
"""

from __future__ import annotations

import logging
import os
import uuid

from django.core.files.storage import default_storage  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.accounts.permissions import IsCustomer, IsCustomerOrEmployee, IsEmployee
from apps.accounts.principal import principal_for
from shared.api.mixins import RentalContextMixin
from shared.domain.errors import RentalCoreError

from .application.reconciliation import (
    payments_for_rental,
    payments_pending_verification,
    process_payment,
    process_slip_upload,
    verify_payment,
)
from .models import Payment
from .serializers import (
    PaymentSerializer,
    RecordPaymentSerializer,
    SlipUploadSerializer,
    VerifyPaymentSerializer,
)

logger = logging.getLogger(__name__)


class SlipUploadView(RentalContextMixin, APIView):
    """POST rentals/{id}/upload-slip/"""

    permission_classes = [permissions.IsAuthenticated, IsCustomer]

    def post(self, request, rental_id: int):  # type: ignore
        customer_id = principal_for(request).require_customer()
        serializer = SlipUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        slip = serializer.validated_data["slip"]

        extension = os.path.splitext(slip.name)[1].lower()
        stored_name = default_storage.save(f"slips/rental_{rental_id}_{uuid.uuid4().hex}{extension}", slip)
        try:
            payment = process_slip_upload(self.get_rental_context(), rental_id, customer_id, stored_name)
        except RentalCoreError:
            default_storage.delete(stored_name)
            logger.info(f"Removed slip {stored_name} after rejected upload for rental {rental_id}")
            raise

        return Response(PaymentSerializer(payment).data, status=status.HTTP_200_OK)


class RentalPaymentsView(RentalContextMixin, APIView):
    """GET/POST rentals/{id}/payments/"""

    def get_permissions(self):  # type: ignore
        if self.request.method == "POST":
            return [permissions.IsAuthenticated(), IsEmployee()]
        return [permissions.IsAuthenticated(), IsCustomerOrEmployee()]

    def get(self, request, rental_id: int):  # type: ignore
        payments = payments_for_rental(self.get_rental_context(), rental_id, principal_for(request))
        return Response(PaymentSerializer(payments, many=True).data)

    def post(self, request, rental_id: int):  # type: ignore
        employee_id = principal_for(request).require_employee()
        serializer = RecordPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        payment = process_payment(
            self.get_rental_context(),
            rental_id,
            employee_id,
            data["amount"],
            data["status"],
            data["method"],
            data.get("transaction_id"),
        )
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)


class VerifyPaymentView(RentalContextMixin, APIView):
    """POST rentals/{id}/verify-payment/"""

    permission_classes = [permissions.IsAuthenticated, IsEmployee]

    def post(self, request, rental_id: int):  # type: ignore
        employee_id = principal_for(request).require_employee()
        serializer = VerifyPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = verify_payment(
            self.get_rental_context(),
            rental_id,
            serializer.validated_data["approved"],
            employee_id,
        )
        return Response(PaymentSerializer(payment).data)


class PaymentViewSet(RentalContextMixin, viewsets.ReadOnlyModelViewSet):
    """Staff list all payments; customers may open their own."""

    queryset = Payment.objects.select_related("rental", "recorded_by").all()
    serializer_class = PaymentSerializer
    filterset_fields = ["status", "rental"]

    def get_permissions(self):  # type: ignore
        if self.action == "retrieve":
            return [permissions.IsAuthenticated(), IsCustomerOrEmployee()]
        return [permissions.IsAuthenticated(), IsEmployee()]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if getattr(self, "swagger_fake_view", False):
            return qs.none()
        principal = principal_for(self.request)
        if principal.is_employee:
            return qs
        return qs.filter(rental__customer_id=principal.id)

    @action(detail=False, methods=["get"], url_path="pending-verification")
    def pending_verification(self, request):  # type: ignore
        payments = payments_pending_verification(self.get_rental_context())
        return Response(PaymentSerializer(payments, many=True).data)
