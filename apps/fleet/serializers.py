"""Serializers for branches and cars."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Car


class CarSerializer(serializers.ModelSerializer):
    branch_name = serializers.ReadOnlyField(source="branch.name")
    branch_address = serializers.ReadOnlyField(source="branch.address")

    class Meta:
        model = Car
        fields = [
            "id",
            "brand",
            "model",
            "price_per_day",
            "availability",
            "parking_spot",
            "branch",
            "branch_name",
            "branch_address",
            "image_url",
        ]
        read_only_fields = fields


class AvailableCarsQuerySerializer(serializers.Serializer):
    """Query string of ``cars/available/``; the window is optional."""

    pickup_date = serializers.DateTimeField(required=False)
    dropoff_date = serializers.DateTimeField(required=False)
    branch = serializers.IntegerField(required=False, min_value=1)

    def validate(self, attrs):  # type: ignore
        if ("pickup_date" in attrs) != ("dropoff_date" in attrs):
            raise serializers.ValidationError("pickup_date and dropoff_date must be given together.")
        return attrs
