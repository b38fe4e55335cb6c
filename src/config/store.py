"""
Runtime settings store.

Layers in-process overrides over the environment-backed Settings, so
registration switches can be changed at runtime without a restart.
Overrides are validated against the Settings field types, so "false"
becomes False the same way it would from the environment.
"""

import threading
from typing import Annotated, Any

from pydantic import TypeAdapter

from src.config.settings import Settings


def _coerce(key: str, value: Any) -> Any:
    """
    Validate an override against its Settings field.

    Raises:
        KeyError: If the key is not a Settings field
        pydantic.ValidationError: If the value does not fit the field type
    """
    if key not in Settings.model_fields:
        raise KeyError(key)
    field = Settings.model_fields[key]
    annotation = Annotated[field.annotation, *field.metadata] if field.metadata else field.annotation
    return TypeAdapter(annotation).validate_python(value)


class MemorySettingsStore:
    """Implements SettingsStore protocol with mutable overrides."""

    def __init__(self, settings: Settings, overrides: dict[str, Any] | None = None) -> None:
        self._settings = settings
        self._overrides: dict[str, Any] = {
            key: _coerce(key, value) for key, value in (overrides or {}).items()
        }
        self._lock = threading.Lock()

    def get(self, key: str) -> Any:
        with self._lock:
            if key in self._overrides:
                return self._overrides[key]
        if key not in Settings.model_fields:
            raise KeyError(key)
        return getattr(self._settings, key)

    def set(self, key: str, value: Any) -> None:
        value = _coerce(key, value)
        with self._lock:
            self._overrides[key] = value

    def reset(self) -> None:
        """Drop every override."""
        with self._lock:
            self._overrides.clear()
