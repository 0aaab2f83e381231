from __future__ import annotations

from enum import Enum


class AlarmVisibility(str, Enum):
    OFF = "off"
    ON = "on"


class EditorSection(str, Enum):
    NAME = "name"
    START = "start"
    END = "end"
    ALARM = "alarm"
    CONTACTS = "contacts"
