"""
Typed access to the `system_settings` key/value table.

Known keys are declared once in `SETTINGS`, with their type, default,
whether anonymous callers may read them and whether they are always
stored encrypted. Keys outside the registry can still be stored as
plain strings.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy import select

from noodlenook.domain.exceptions import AuthorizationError, NotFoundError, ValidationError
from noodlenook.domain.visibility import SORT_ORDERS
from noodlenook.extensions import db
from noodlenook.models.base import utc_now
from noodlenook.models.system_setting import SystemSetting
from noodlenook.services.notifications import validate_headers
from noodlenook.utils.audit import log_action
from noodlenook.utils.encryption import decrypt, encrypt
from noodlenook.utils.transaction import transactional

logger = logging.getLogger(__name__)

MAX_KEY_LENGTH = 100


@dataclass(frozen=True)
class SettingDefinition:
    key: str
    type: str = "str"  # str | bool | int | choice | json
    default: Any = None
    public: bool = False
    secret: bool = False
    choices: tuple = ()
    validator: Optional[Callable] = None


SETTINGS = {
    definition.key: definition
    for definition in (
        SettingDefinition("default_sort_order", "choice", "alphabetical", public=True, choices=SORT_ORDERS),
        SettingDefinition("show_sort_dropdown", "bool", True, public=True),
        SettingDefinition("approval_workflow_enabled", "bool", False),
        SettingDefinition("smtp_host", "str"),
        SettingDefinition("smtp_port", "int", 587),
        SettingDefinition("smtp_secure", "bool", False),
        SettingDefinition("smtp_user", "str"),
        SettingDefinition("smtp_pass", "str", secret=True),
        SettingDefinition("smtp_from", "str"),
        SettingDefinition("webhook_url", "str"),
        SettingDefinition("webhook_headers", "json", {}, validator=validate_headers),
    )
}

PUBLIC_KEYS = frozenset(key for key, d in SETTINGS.items() if d.public)


def _coerce(definition: SettingDefinition, raw: Optional[str]):
    """Parse a stored string into the registered type, falling back to the default."""
    if raw is None or raw == "":
        return definition.default

    try:
        if definition.type == "bool":
            return raw.strip().lower() == "true"
        if definition.type == "int":
            return int(raw)
        if definition.type == "json":
            return json.loads(raw)
    except (ValueError, TypeError):
        logger.warning("Setting %s holds an unparsable value; using default", definition.key)
        return definition.default

    if definition.type == "choice" and raw not in definition.choices:
        return definition.default

    return raw


def _serialize(key: str, value) -> Optional[str]:
    """Validate an incoming value and turn it into the stored string form."""
    if value is None:
        return None

    definition = SETTINGS.get(key)

    if isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, (dict, list)):
        text = json.dumps(value)
    else:
        text = str(value)

    if definition is None:
        return text

    if definition.type == "bool" and text.lower() not in ("true", "false"):
        raise ValidationError(f"{key} must be true or false")

    if definition.type == "int" and text != "":
        try:
            int(text)
        except ValueError:
            raise ValidationError(f"{key} must be an integer")

    if definition.type == "choice" and text not in definition.choices:
        raise ValidationError(f"{key} must be one of: {', '.join(definition.choices)}")

    if definition.type == "json" and text != "":
        try:
            parsed = json.loads(text)
        except ValueError:
            raise ValidationError(f"{key} must be valid JSON")
        if definition.validator is not None:
            definition.validator(parsed)

    return text.lower() if definition.type == "bool" else text


def _plain_value(setting: SystemSetting) -> Optional[str]:
    if setting.encrypted and setting.value:
        return decrypt(setting.value)
    return setting.value


class SettingsService:
    """Settings store consulted by the approval gate, listings and notifications."""

    def _find(self, key) -> Optional[SystemSetting]:
        return SystemSetting.query.filter_by(key=key).first()

    # ---------------------------------
    # Raw store operations
    # ---------------------------------
    def list_all(self):
        return SystemSetting.query.order_by(SystemSetting.key.asc()).all()

    def get(self, key) -> SystemSetting:
        setting = self._find(key)
        if not setting:
            raise NotFoundError("Setting not found")
        return setting

    def get_public(self, key):
        if key not in PUBLIC_KEYS:
            raise AuthorizationError("This setting is not publicly accessible")

        setting = self._find(key)
        if setting is None:
            default = SETTINGS[key].default
            return _serialize(key, default)

        return _plain_value(setting)

    def upsert(self, key, value, *, encrypted=False, actor_id=None) -> SystemSetting:
        if not isinstance(key, str) or not key or len(key) > MAX_KEY_LENGTH:
            raise ValidationError("Invalid setting key")

        definition = SETTINGS.get(key)
        if definition is not None and definition.secret:
            encrypted = True

        text = _serialize(key, value)
        stored = encrypt(text) if encrypted and text else text

        with transactional():
            setting = db.session.execute(
                select(SystemSetting)
                .where(SystemSetting.key == key)
                .with_for_update()
            ).scalar_one_or_none()

            if setting is None:
                setting = SystemSetting()
                setting.key = key
                db.session.add(setting)

            setting.value = stored
            setting.encrypted = bool(encrypted)
            setting.updated_by = actor_id
            setting.updated_at = utc_now()

            log_action(
                action="setting.update",
                entity_type="setting",
                entity_id=key[:36],
                payload={"key": key, "encrypted": bool(encrypted)},
            )

        logger.info("Setting %s updated", key)
        return setting

    def delete(self, key) -> None:
        setting = self.get(key)

        with transactional():
            db.session.delete(setting)
            log_action(
                action="setting.delete",
                entity_type="setting",
                entity_id=key[:36],
                payload={"key": key},
            )

    # ---------------------------------
    # Typed accessors
    # ---------------------------------
    def value_of(self, setting: SystemSetting) -> Optional[str]:
        """Decrypted string value; None when decryption fails."""
        return _plain_value(setting)

    def typed(self, key):
        definition = SETTINGS[key]
        setting = self._find(key)
        raw = _plain_value(setting) if setting else None
        return _coerce(definition, raw)

    def approval_workflow_enabled(self) -> bool:
        return bool(self.typed("approval_workflow_enabled"))

    def default_sort_order(self) -> str:
        return self.typed("default_sort_order")

    def smtp_config(self) -> dict:
        return {
            "host": self.typed("smtp_host"),
            "port": self.typed("smtp_port"),
            "secure": self.typed("smtp_secure"),
            "user": self.typed("smtp_user"),
            "password": self.typed("smtp_pass"),
            "sender": self.typed("smtp_from"),
        }

    def webhook_config(self) -> dict:
        headers = self.typed("webhook_headers")
        return {
            "url": self.typed("webhook_url"),
            "headers": headers if isinstance(headers, dict) else {},
        }


settings_service = SettingsService()
