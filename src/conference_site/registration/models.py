"""Registration and attendee models for conference-site."""

import re

from django.db import models
from encrypted_fields import EncryptedTextField

_NON_DIGITS = re.compile(r"\D+")


def phone_digits(value: str | None) -> str:
    """Return only the digits of a phone number (``""`` for empty input)."""
    if not value:
        return ""
    return _NON_DIGITS.sub("", value)


class ShirtSize(models.TextChoices):
    """T-shirt sizes offered at registration and in the merch checkout."""

    XS = "XS", "XS"
    S = "S", "S"
    M = "M", "M"
    L = "L", "L"
    XL = "XL", "XL"
    XXL = "2XL", "2XL"
    XXXL = "3XL", "3XL"


class Registration(models.Model):
    """A submitted conference sign-up.

    Holds the primary contact for the group. The contact email is stored
    lower-cased and is unique, so two concurrent submissions with the same
    email cannot both be persisted. ``contact_phone_digits`` mirrors
    ``contact_phone`` without formatting and backs the duplicate lookup.
    """

    contact_name = models.CharField(max_length=200)
    contact_phone = models.CharField(max_length=50)
    contact_phone_digits = models.CharField(max_length=50, blank=True, default="", db_index=True, editable=False)
    contact_email = models.EmailField(unique=True)
    contact_address = models.CharField(max_length=500, blank=True, default="")
    prayer_request = EncryptedTextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.contact_name} <{self.contact_email}>"

    def save(self, *args: object, **kwargs: object) -> None:
        self.contact_email = (self.contact_email or "").strip().lower()
        self.contact_phone_digits = phone_digits(self.contact_phone)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "contact_phone" in update_fields:
            kwargs["update_fields"] = {*update_fields, "contact_phone_digits"}
        super().save(*args, **kwargs)  # type: ignore[arg-type]


class Attendee(models.Model):
    """A person attending under a registration.

    The primary contact is stored as an attendee too, so the attendee count
    equals the number of tickets reserved.
    """

    registration = models.ForeignKey(
        Registration,
        on_delete=models.CASCADE,
        related_name="attendees",
    )
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=50, blank=True, default="")
    phone_digits = models.CharField(max_length=50, blank=True, default="", db_index=True, editable=False)
    email = models.EmailField(blank=True, default="", db_index=True)
    address = models.CharField(max_length=500, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    wants_shirt = models.BooleanField(default=False)
    shirt_size = models.CharField(max_length=8, choices=ShirtSize.choices, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return self.name

    def save(self, *args: object, **kwargs: object) -> None:
        self.email = (self.email or "").strip().lower()
        self.phone_digits = phone_digits(self.phone)
        self.wants_shirt = bool(self.shirt_size)
        super().save(*args, **kwargs)  # type: ignore[arg-type]
