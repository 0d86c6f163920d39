# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tri-state normalisation of raw policy values.

Raw policies spell "off" several ways (``None``, ``False``, ``""``) and
leave other entries out entirely. Every resolver reads values through
:func:`read_setting`, which folds them into one :class:`Setting`.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_MISSING = object()


class SettingState(enum.Enum):
    """Normalised state of one configuration entry."""

    ENABLED = "enabled"
    DISABLED = "disabled"
    UNSET = "unset"


@dataclass(frozen=True)
class Setting:
    """A configuration entry: ``ENABLED(value)``, ``DISABLED`` or ``UNSET``.

    Attributes:
        state: Which of the three states the entry is in.
        value: The raw value when enabled, otherwise ``None``.
        key: The configuration key the value was read from, if any.
    """

    state: SettingState
    value: Any = None
    key: str | None = None

    @classmethod
    def enabled(cls, value: Any, key: str | None = None) -> Setting:
        return cls(SettingState.ENABLED, value, key)

    @classmethod
    def disabled(cls, key: str | None = None) -> Setting:
        return cls(SettingState.DISABLED, None, key)

    @classmethod
    def unset(cls) -> Setting:
        return cls(SettingState.UNSET)

    @property
    def is_enabled(self) -> bool:
        return self.state is SettingState.ENABLED

    @property
    def is_disabled(self) -> bool:
        return self.state is SettingState.DISABLED

    @property
    def is_unset(self) -> bool:
        return self.state is SettingState.UNSET

    def or_default(self, default: Any) -> Any:
        """Value when enabled, *default* when unset, ``None`` when disabled."""
        if self.is_enabled:
            return self.value
        if self.is_unset:
            return default
        return None


def is_off(value: Any) -> bool:
    """Return ``True`` for the off sentinels ``None``, ``False`` and ``""``."""
    return value is None or value is False or (isinstance(value, str) and value == "")


def normalize(value: Any, key: str | None = None) -> Setting:
    """Fold a raw value into a :class:`Setting`."""
    if value is _MISSING:
        return Setting.unset()
    if is_off(value):
        return Setting.disabled(key)
    return Setting.enabled(value, key)


def read_setting(section: Mapping[str, Any] | None, *keys: str) -> Setting:
    """Read the first present key of *keys* from *section*.

    Keys are candidate spellings of one logical setting, canonical first.
    The first key present in *section* decides the result even when its
    value is an off sentinel; later keys are only consulted when earlier
    ones are absent.
    """
    if not isinstance(section, Mapping):
        return Setting.unset()
    for key in keys:
        value = section.get(key, _MISSING)
        if value is not _MISSING:
            return normalize(value, key)
    return Setting.unset()


def is_flag_on(section: Mapping[str, Any] | None, key: str) -> bool:
    """Return ``True`` when *section[key]* is enabled and truthy."""
    setting = read_setting(section, key)
    return setting.is_enabled and bool(setting.value)
