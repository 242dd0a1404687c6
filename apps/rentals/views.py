"""API views for rentals."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.accounts.permissions import IsCustomer, IsCustomerOrEmployee, IsEmployee
from apps.accounts.principal import principal_for
from shared.api.mixins import RentalContextMixin

from .application.booking import initiate_booking, quote_rental_cost
from .application.state_machine import cancel_customer_rental, transition
from .domain.lifecycle import RentalStatus
from .filters import RentalFilterSet
from .models import Rental
from .serializers import RentalCreateSerializer, RentalDetailSerializer, RentalSerializer


class RentalViewSet(
    RentalContextMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Customers book and see their own rentals; employees see all of them
    and drive the lifecycle.
    """

    queryset = Rental.objects.select_related("car", "car__branch", "customer").all()
    permission_classes = [permissions.IsAuthenticated, IsCustomerOrEmployee]
    filter_backends = [DjangoFilterBackend]
    filterset_class = RentalFilterSet
    lookup_value_regex = r"\d+"

    def get_permissions(self):  # type: ignore
        if self.action == "create":
            return [permissions.IsAuthenticated(), IsCustomer()]
        if self.action in {"confirm", "activate", "return_car"}:
            return [permissions.IsAuthenticated(), IsEmployee()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return RentalCreateSerializer
        if self.action == "retrieve":
            return RentalDetailSerializer
        return RentalSerializer

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if getattr(self, "swagger_fake_view", False):
            return qs.none()
        principal = principal_for(self.request)
        if principal.is_employee:
            return qs
        return qs.filter(customer_id=principal.id)

    def create(self, request, *args, **kwargs):  # type: ignore
        customer_id = principal_for(request).require_customer()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        rental = initiate_booking(
            self.get_rental_context(),
            customer_id,
            data["car"],
            data["pickup_date"],
            data["dropoff_date"],
            data.get("pickup_location"),
        )
        read_serializer = RentalSerializer(rental, context=self.get_serializer_context())
        return Response(read_serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"])
    def price(self, request, pk=None):  # type: ignore
        rental: Rental = self.get_object()  # type: ignore
        quote = quote_rental_cost(self.get_rental_context(), rental.pk)
        return Response({"rental_id": rental.pk, **quote.to_dict()})

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        principal = principal_for(request)
        ctx = self.get_rental_context()
        if principal.is_employee:
            rental = transition(ctx, int(pk), RentalStatus.CANCELLED, actor=principal)
        else:
            rental = cancel_customer_rental(ctx, int(pk), principal.id)
        return Response(RentalSerializer(rental).data)

    def _advance(self, request, pk, target: str) -> Response:
        rental = transition(self.get_rental_context(), int(pk), target, actor=principal_for(request))
        return Response(RentalSerializer(rental).data)

    @action(detail=True, methods=["post"])
    def confirm(self, request, pk=None):  # type: ignore
        return self._advance(request, pk, RentalStatus.CONFIRMED)

    @action(detail=True, methods=["post"])
    def activate(self, request, pk=None):  # type: ignore
        return self._advance(request, pk, RentalStatus.ACTIVE)

    @action(detail=True, methods=["post"], url_path="return", url_name="return")
    def return_car(self, request, pk=None):  # type: ignore
        return self._advance(request, pk, RentalStatus.RETURNED)
