from __future__ import annotations

from datetime import datetime, timezone
from typing import NewType

# Milliseconds since the Unix epoch, always assigned by the record store.
EpochMillis = NewType("EpochMillis", int)


def to_epoch_millis(value: datetime) -> EpochMillis:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return EpochMillis(int(value.timestamp() * 1000))


def from_epoch_millis(value: EpochMillis) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
