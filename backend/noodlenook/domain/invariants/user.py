import re

from noodlenook.domain.exceptions import InvariantViolation, ValidationError
from noodlenook.domain.roles import ROLES

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{3,50}$")
MIN_PASSWORD_LENGTH = 6


def assert_role(role):
    if role not in ROLES:
        raise ValidationError("Invalid role")


def normalize_email(email):
    if not isinstance(email, str) or not EMAIL_PATTERN.match(email.strip()):
        raise ValidationError("A valid email is required")
    return email.strip().lower()


def assert_credentials(*, username, password):
    if not isinstance(username, str) or not USERNAME_PATTERN.match(username):
        raise InvariantViolation(
            "Username must be 3-50 characters of letters, digits, '.', '_' or '-'"
        )
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise InvariantViolation(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
