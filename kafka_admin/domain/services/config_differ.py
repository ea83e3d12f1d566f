"""Separate explicitly-set topic config from inherited defaults."""
from __future__ import annotations

from enum import IntEnum
from typing import Dict, Iterable

from kafka_admin.infra.kafka.broker import ConfigEntry


class ConfigSource(IntEnum):
    """Origin of a config value as reported by DescribeConfigs v1+."""

    UNKNOWN = 0
    DYNAMIC_TOPIC_CONFIG = 1
    DYNAMIC_BROKER_CONFIG = 2
    DYNAMIC_DEFAULT_BROKER_CONFIG = 3
    STATIC_BROKER_CONFIG = 4
    DEFAULT_CONFIG = 5
    DYNAMIC_BROKER_LOGGER_CONFIG = 6


_DEFAULT_SOURCES = (ConfigSource.DEFAULT_CONFIG, ConfigSource.STATIC_BROKER_CONFIG)


def is_default_value(entry: ConfigEntry, version: int) -> bool:
    """Return True when *entry* is inherited rather than set on the topic.

    v0 responses carry an ``is_default`` flag; from v1 on the broker reports a
    config source instead and the flag is gone.
    """
    if version == 0:
        return bool(entry.is_default)
    return entry.source in _DEFAULT_SOURCES


def explicit_config(entries: Iterable[ConfigEntry], version: int) -> Dict[str, str]:
    """Return name -> value for every non-default entry.

    Sensitive values come back as null and are kept as empty strings.
    """
    return {
        e.name: e.value if e.value is not None else ""
        for e in entries
        if not is_default_value(e, version)
    }
