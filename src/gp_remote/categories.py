"""
Enumerated categorical fields of the GP appointments extracts.

Wide tables are addressed by these members only, never by free-typed
spellings, so a category that drifts in the raw files ("DNA" vs "Did Not
Attend") fails loudly at load time instead of producing an all-zero column.
"""

from __future__ import annotations

import re
from enum import Enum


class HcpType(str, Enum):
    GP = "GP"
    OTHER = "Other Practice staff"
    UNKNOWN = "Unknown"


class ApptStatus(str, Enum):
    ATTENDED = "Attended"
    DNA = "DNA"
    UNKNOWN = "Unknown"


class ApptMode(str, Enum):
    FACE_TO_FACE = "Face-to-Face"
    HOME_VISIT = "Home Visit"
    TELEPHONE = "Telephone"
    VIDEO_ONLINE = "Video/Online"
    UNKNOWN = "Unknown"


class BookingInterval(str, Enum):
    SAME_DAY = "Same Day"
    ONE_DAY = "1 Day"
    TWO_TO_SEVEN = "2 to 7 Days"
    EIGHT_TO_FOURTEEN = "8 to 14 Days"
    FIFTEEN_TO_TWENTY_ONE = "15 to 21 Days"
    TWENTY_TWO_TO_TWENTY_EIGHT = "22 to 28 Days"
    MORE_THAN_TWENTY_EIGHT = "More than 28 Days"
    UNKNOWN = "Unknown / Data Issue"

    @property
    def label(self) -> str:
        return INTERVAL_LABELS[self]


class RemoteFlag(str, Enum):
    REMOTE = "Remote"
    FACE_TO_FACE = "FaceToFace"


INTERVAL_LABELS = {
    BookingInterval.SAME_DAY: "SameDay",
    BookingInterval.ONE_DAY: "1Day",
    BookingInterval.TWO_TO_SEVEN: "2to7Days",
    BookingInterval.EIGHT_TO_FOURTEEN: "8to14Days",
    BookingInterval.FIFTEEN_TO_TWENTY_ONE: "15to21Days",
    BookingInterval.TWENTY_TWO_TO_TWENTY_EIGHT: "22to28Days",
    BookingInterval.MORE_THAN_TWENTY_EIGHT: "MoreThan28Days",
    BookingInterval.UNKNOWN: "Unknown",
}

KNOWN_INTERVALS = [i for i in BookingInterval if i is not BookingInterval.UNKNOWN]

REMOTE_FLAGS = {
    ApptMode.TELEPHONE: RemoteFlag.REMOTE,
    ApptMode.VIDEO_ONLINE: RemoteFlag.REMOTE,
    ApptMode.FACE_TO_FACE: RemoteFlag.FACE_TO_FACE,
    ApptMode.HOME_VISIT: RemoteFlag.FACE_TO_FACE,
}

# Canonical column name -> enum, for every categorical field of the union
FIELDS = {
    "hcp_type": HcpType,
    "status": ApptStatus,
    "mode": ApptMode,
    "booking_interval": BookingInterval,
}

UNKNOWN_MEMBERS = {
    "hcp_type": HcpType.UNKNOWN,
    "status": ApptStatus.UNKNOWN,
    "mode": ApptMode.UNKNOWN,
    "booking_interval": BookingInterval.UNKNOWN,
}

# Spellings seen in some monthly files that mean the same member
ALIASES = {
    "booking_interval": {
        "Unknown or Data Issue": BookingInterval.UNKNOWN,
    },
}

_WHITESPACE = re.compile(r"\s+")


def parse_category(field: str, raw) -> Enum | None:
    """Return the member for a raw spelling, or None if it is not recognised."""
    if not isinstance(raw, str):
        return None
    cleaned = _WHITESPACE.sub(" ", raw).strip()
    enum = FIELDS[field]
    try:
        return enum(cleaned)
    except ValueError:
        return ALIASES.get(field, {}).get(cleaned)


def mode_column(status: ApptStatus, mode: ApptMode) -> str:
    return f"{status.value}_{mode.value}"


def booking_column(interval: BookingInterval, flag: RemoteFlag) -> str:
    return f"{interval.label}_{flag.value}"


MODE_COLUMNS = [mode_column(s, m) for s in ApptStatus for m in ApptMode]
BOOKING_COLUMNS = [booking_column(i, f) for i in BookingInterval for f in RemoteFlag]
