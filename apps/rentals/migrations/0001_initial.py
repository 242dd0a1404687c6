from django.db import migrations, models
import django.db.models.deletion


RENTAL_STATUS_CHOICES = [
    ("Pending", "Pending"),
    ("Booked", "Booked"),
    ("Pending Verification", "Pending Verification"),
    ("Confirmed", "Confirmed"),
    ("Active", "Active"),
    ("Returned", "Returned"),
    ("Cancelled", "Cancelled"),
    ("Failed", "Failed"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("fleet", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Rental",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("pickup_date", models.DateTimeField()),
                ("dropoff_date", models.DateTimeField()),
                ("pickup_location", models.CharField(blank=True, max_length=500, null=True)),
                ("status", models.CharField(choices=RENTAL_STATUS_CHOICES, default="Pending", max_length=32)),
                (
                    "booking_date",
                    models.DateTimeField(blank=True, help_text="Set when the rental is confirmed.", null=True),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "car",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="rentals",
                        to="fleet.car",
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="rentals",
                        to="accounts.customer",
                    ),
                ),
            ],
            options={
                "verbose_name": "Rental",
                "verbose_name_plural": "Rentals",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["car", "pickup_date", "dropoff_date"], name="rental_car_window_idx"),
                    models.Index(fields=["status"], name="rental_status_idx"),
                    models.Index(fields=["customer", "status"], name="rental_customer_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(dropoff_date__gt=models.F("pickup_date")),
                        name="rental_valid_dates",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="RentalStatusLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("from_status", models.CharField(choices=RENTAL_STATUS_CHOICES, max_length=32)),
                ("to_status", models.CharField(choices=RENTAL_STATUS_CHOICES, max_length=32)),
                (
                    "actor_kind",
                    models.CharField(
                        choices=[("customer", "Customer"), ("employee", "Employee"), ("system", "System")],
                        default="system",
                        max_length=16,
                    ),
                ),
                ("actor_id", models.BigIntegerField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "rental",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="status_logs",
                        to="rentals.rental",
                    ),
                ),
            ],
            options={
                "verbose_name": "Rental status change",
                "verbose_name_plural": "Rental status changes",
                "ordering": ["created_at", "id"],
            },
        ),
    ]
