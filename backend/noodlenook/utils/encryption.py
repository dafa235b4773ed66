import logging

from cryptography.fernet import Fernet, InvalidToken
from flask import current_app

from noodlenook.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _fernet():
    key = current_app.config.get("SETTINGS_ENCRYPTION_KEY")
    if not key:
        return None
    try:
        return Fernet(key)
    except (ValueError, TypeError):
        logger.error("SETTINGS_ENCRYPTION_KEY is not a valid Fernet key")
        return None


def encrypt(text):
    if text is None or text == "":
        return None

    fernet = _fernet()
    if fernet is None:
        raise ValidationError("Encrypted settings are not configured on this server")

    return fernet.encrypt(text.encode()).decode()


def decrypt(text):
    """Returns None instead of raising when the value cannot be decrypted."""
    if not text:
        return None

    fernet = _fernet()
    if fernet is None:
        logger.warning("Cannot decrypt setting: SETTINGS_ENCRYPTION_KEY not configured")
        return None

    try:
        return fernet.decrypt(text.encode()).decode()
    except InvalidToken:
        logger.warning("Cannot decrypt setting: invalid token or wrong key")
        return None
