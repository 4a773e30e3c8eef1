"""Client-side checks run before the identity store is called."""

import re
from dataclasses import dataclass

from whispernotes.errors import PasswordMismatchError, ValidationError, WeakPasswordError

MIN_PASSWORD_LENGTH = 8
SPECIAL_CHARACTERS = re.compile(r'[!@#$%^&*(),.?":{}|<>]')


@dataclass(frozen=True)
class PasswordStrength:
    """Which strength rules a candidate password satisfies."""
    min_length: bool
    has_upper_case: bool
    has_lower_case: bool
    has_numbers: bool
    has_special_char: bool

    @property
    def is_valid(self) -> bool:
        return (
            self.min_length
            and self.has_upper_case
            and self.has_lower_case
            and self.has_numbers
            and self.has_special_char
        )


def check_password_strength(password: str) -> PasswordStrength:
    return PasswordStrength(
        min_length=len(password) >= MIN_PASSWORD_LENGTH,
        has_upper_case=re.search(r"[A-Z]", password) is not None,
        has_lower_case=re.search(r"[a-z]", password) is not None,
        has_numbers=re.search(r"\d", password) is not None,
        has_special_char=SPECIAL_CHARACTERS.search(password) is not None,
    )


def _require(value: str, field: str) -> None:
    if not value or not value.strip():
        raise ValidationError(f"{field} is required")


def validate_sign_in(email: str, password: str) -> None:
    """
    Reject a sign-in form with missing fields.

    :raises ValidationError: If email or password is blank
    """
    _require(email, "Email")
    _require(password, "Password")


def validate_sign_up(name: str, email: str, password: str, confirm_password: str) -> None:
    """
    Reject a sign-up form before it reaches the identity store.

    The confirmation check runs before the strength check, so a mismatch is
    reported even for weak passwords.

    :raises PasswordMismatchError: If password and confirmation differ
    :raises WeakPasswordError: If the password fails a strength rule
    :raises ValidationError: If name or email is blank
    """
    _require(name, "Name")
    _require(email, "Email")
    if password != confirm_password:
        raise PasswordMismatchError("Passwords do not match")
    if not check_password_strength(password).is_valid:
        raise WeakPasswordError("Password does not meet requirements")
