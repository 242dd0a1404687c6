"""Serializers for payments."""

from __future__ import annotations

import os

from rest_framework import serializers  # type: ignore

from .application.reconciliation import RECORDABLE_STATUSES
from .models import Payment

SLIP_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".pdf")
SLIP_MAX_BYTES = 5 * 1024 * 1024


class PaymentSerializer(serializers.ModelSerializer):
    rental_id = serializers.ReadOnlyField()
    recorded_by_id = serializers.ReadOnlyField()

    class Meta:
        model = Payment
        fields = [
            "id",
            "rental_id",
            "amount",
            "status",
            "method",
            "recorded_by_id",
            "transaction_id",
            "slip_reference",
            "payment_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class RecordPaymentSerializer(serializers.Serializer):
    """Staff input for recording a payment by hand."""

    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    status = serializers.ChoiceField(choices=sorted(s.value for s in RECORDABLE_STATUSES))
    method = serializers.CharField(max_length=50)
    transaction_id = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)


class VerifyPaymentSerializer(serializers.Serializer):
    approved = serializers.BooleanField()


class SlipUploadSerializer(serializers.Serializer):
    """Proof of payment image or PDF."""

    slip = serializers.FileField(required=True)

    def validate_slip(self, value):  # type: ignore
        extension = os.path.splitext(value.name)[1].lower()
        if extension not in SLIP_EXTENSIONS:
            raise serializers.ValidationError("Slip must be a JPG, PNG, GIF or PDF file.")
        if value.size > SLIP_MAX_BYTES:
            raise serializers.ValidationError("Slip must not exceed 5 MB.")
        return value
