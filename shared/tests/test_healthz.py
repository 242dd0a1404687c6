from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.urls import reverse


@pytest.mark.django_db
def test_healthz_reports_connected_database(client):
    response = client.get(reverse("healthz"))

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected"}


@pytest.mark.django_db
def test_healthz_returns_503_when_database_is_down(client):
    with patch("shared.api.views.connections") as connections:
        connections.__getitem__.return_value.cursor.side_effect = DatabaseError("connection refused")
        response = client.get(reverse("healthz"))

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


@pytest.mark.django_db
def test_healthz_only_answers_get(client):
    assert client.post(reverse("healthz")).status_code == 405
