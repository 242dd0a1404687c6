"""Serializers for rentals."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Rental, RentalStatusLog


class RentalCreateSerializer(serializers.Serializer):
    """Booking request from a customer."""

    car = serializers.IntegerField(min_value=1)
    pickup_date = serializers.DateTimeField()
    dropoff_date = serializers.DateTimeField()
    pickup_location = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class RentalStatusLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = RentalStatusLog
        fields = ["from_status", "to_status", "actor_kind", "actor_id", "created_at"]
        read_only_fields = fields


class RentalSerializer(serializers.ModelSerializer):
    """Read model of a rental."""

    customer_id = serializers.ReadOnlyField(source="customer.id")
    car_id = serializers.ReadOnlyField(source="car.id")
    car_label = serializers.SerializerMethodField()

    class Meta:
        model = Rental
        fields = [
            "id",
            "customer_id",
            "car_id",
            "car_label",
            "pickup_date",
            "dropoff_date",
            "pickup_location",
            "status",
            "booking_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_car_label(self, obj: Rental) -> str:
        return str(obj.car)


class RentalDetailSerializer(RentalSerializer):
    status_logs = RentalStatusLogSerializer(many=True, read_only=True)

    class Meta(RentalSerializer.Meta):
        fields = RentalSerializer.Meta.fields + ["status_logs"]
        read_only_fields = fields
