"""Read-only car catalogue."""

from __future__ import annotations

from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.rentals.services import available_cars
from shared.api.mixins import RentalContextMixin

from .models import Car
from .serializers import AvailableCarsQuerySerializer, CarSerializer


class CarViewSet(RentalContextMixin, viewsets.ReadOnlyModelViewSet):
    queryset = Car.objects.select_related("branch").all()
    serializer_class = CarSerializer
    permission_classes = [permissions.AllowAny]
    filterset_fields = ["branch", "brand", "availability"]

    @action(detail=False, methods=["get"])
    def available(self, request):  # type: ignore
        """Cars free for the requested window, or currently free without one."""

        query = AvailableCarsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        cars = available_cars(
            self.get_rental_context(),
            query.validated_data.get("pickup_date"),
            query.validated_data.get("dropoff_date"),
            query.validated_data.get("branch"),
        )
        return Response(CarSerializer(cars, many=True).data)
