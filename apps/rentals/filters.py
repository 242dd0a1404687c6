"""FilterSet for staff rental listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .domain.lifecycle import RentalStatus
from .models import Rental


class RentalFilterSet(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=RentalStatus.choices)
    car = django_filters.NumberFilter(field_name="car_id")
    customer = django_filters.NumberFilter(field_name="customer_id")
    branch = django_filters.NumberFilter(field_name="car__branch_id")
    pickup_from = django_filters.IsoDateTimeFilter(field_name="pickup_date", lookup_expr="gte")
    pickup_to = django_filters.IsoDateTimeFilter(field_name="pickup_date", lookup_expr="lt")

    class Meta:
        model = Rental
        fields = ["status", "car", "customer", "branch"]
