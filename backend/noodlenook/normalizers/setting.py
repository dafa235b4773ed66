from .page import _iso


def normalize_setting(setting, value):
    """`value` is passed in already decrypted (or None if that failed)."""
    return {
        "key": setting.key,
        "value": value,
        "encrypted": setting.encrypted,
        "updated_at": _iso(setting.updated_at),
    }
