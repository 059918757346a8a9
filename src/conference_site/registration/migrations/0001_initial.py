import django.db.models.deletion
import encrypted_fields.fields
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Registration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("contact_name", models.CharField(max_length=200)),
                ("contact_phone", models.CharField(max_length=50)),
                (
                    "contact_phone_digits",
                    models.CharField(blank=True, db_index=True, default="", editable=False, max_length=50),
                ),
                ("contact_email", models.EmailField(max_length=254, unique=True)),
                ("contact_address", models.CharField(blank=True, default="", max_length=500)),
                ("prayer_request", encrypted_fields.fields.EncryptedTextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="Attendee",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                ("phone_digits", models.CharField(blank=True, db_index=True, default="", editable=False, max_length=50)),
                ("email", models.EmailField(blank=True, db_index=True, default="", max_length=254)),
                ("address", models.CharField(blank=True, default="", max_length=500)),
                ("notes", models.TextField(blank=True, default="")),
                ("wants_shirt", models.BooleanField(default=False)),
                (
                    "shirt_size",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("XS", "XS"),
                            ("S", "S"),
                            ("M", "M"),
                            ("L", "L"),
                            ("XL", "XL"),
                            ("2XL", "2XL"),
                            ("3XL", "3XL"),
                        ],
                        default="",
                        max_length=8,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "registration",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendees",
                        to="site_registration.registration",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
