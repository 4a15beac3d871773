# ris_core/accounts/validators.py
from __future__ import annotations

import re

from django.contrib.auth import password_validation
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import RegexValidator
from rest_framework.exceptions import ValidationError

mobile_number_validator = RegexValidator(
    regex=r"^\d{10}$",
    message="Mobile number must be exactly 10 digits.",
)


class CharacterClassValidator:
    """
    Password must mix upper case, lower case, digits and symbols.
    Wired through AUTH_PASSWORD_VALIDATORS next to MinimumLengthValidator.
    """

    CLASSES = (
        (re.compile(r"[A-Z]"), "an uppercase letter"),
        (re.compile(r"[a-z]"), "a lowercase letter"),
        (re.compile(r"\d"), "a digit"),
        (re.compile(r"[^A-Za-z0-9]"), "a symbol"),
    )

    def validate(self, password, user=None):
        missing = [label for pattern, label in self.CLASSES if not pattern.search(password or "")]
        if missing:
            raise DjangoValidationError(
                "Password must contain " + ", ".join(missing) + ".",
                code="password_character_classes",
            )

    def get_help_text(self):
        return "Your password must contain an uppercase letter, a lowercase letter, a digit and a symbol."


def check_password_strength(password: str, *, user=None, field: str = "password") -> None:
    """Run the configured password validators and raise a DRF ValidationError keyed by `field`."""
    try:
        password_validation.validate_password(password, user=user)
    except DjangoValidationError as e:
        raise ValidationError({field: list(e.messages)})
