"""Pydantic models for the phone directory."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
import re

# Digits, whitespace, brackets, plus and minus
_PHONE_CHARS = re.compile(r'^[0-9+\-()\s]+$')

SNAPSHOT_VERSION = 1


class PhoneType(Enum):
    """Closed set of phone categories, valued by display label."""

    MOBILE = "Mobile"
    HOME = "Home"
    WORK = "Work"
    FAX = "Fax"
    OTHER = "Other"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def labels(cls) -> List[str]:
        """Display labels in declaration order."""
        return [member.label for member in cls]

    @classmethod
    def from_label(cls, label: Optional[str]) -> Optional["PhoneType"]:
        """Look up a type by its exact display label, or None if unknown."""
        for member in cls:
            if member.label == label:
                return member
        return None

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on enum name or label."""
        needle = query.casefold()
        return needle in self.name.casefold() or needle in self.label.casefold()

    def __str__(self) -> str:
        return self.label


class PhoneNumber(BaseModel):
    """A raw phone number and its type, compared by value."""

    model_config = ConfigDict(frozen=True)

    number: str = Field(..., description="Phone number exactly as entered")
    type: PhoneType = Field(..., description="Phone category")

    def contains(self, query: str) -> bool:
        """Check whether the raw number contains the query, ignoring case."""
        return query.casefold() in self.number.casefold()

    def is_valid(self) -> bool:
        """Check the number is non-blank and uses only phone punctuation."""
        if not self.number or not self.number.strip():
            return False
        return bool(_PHONE_CHARS.match(self.number))

    @property
    def formatted(self) -> str:
        return f"{self.number} ({self.type.label})"

    def __str__(self) -> str:
        return self.formatted


class Subscriber(BaseModel):
    """A named directory entry owning an ordered set of phone numbers.

    Subscribers compare equal only when they share an ``id``; two entries with
    identical names are still distinct. Ordering is by last, first and middle
    name, each compared case-insensitively.
    """

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        frozen=True,
        description="Opaque identifier assigned at creation"
    )
    last_name: str = Field(..., description="Family name")
    first_name: str = Field(..., description="Given name")
    middle_name: str = Field(default="", description="Optional middle name, empty when absent")
    phone_numbers: List[PhoneNumber] = Field(default_factory=list)

    @field_validator('middle_name', mode='before')
    @classmethod
    def absent_middle_name(cls, v: Optional[str]) -> str:
        """Treat a missing middle name the same as an empty one."""
        return v if v is not None else ""

    @property
    def full_name(self) -> str:
        parts = [self.last_name, self.first_name, self.middle_name]
        return " ".join(part for part in parts if part)

    @property
    def sort_key(self):
        return (
            self.last_name.casefold(),
            self.first_name.casefold(),
            self.middle_name.casefold(),
        )

    def rename(self, last_name: str, first_name: str, middle_name: Optional[str] = None) -> None:
        """Replace the name fields in place; the id is unchanged."""
        self.last_name = last_name
        self.first_name = first_name
        self.middle_name = middle_name if middle_name is not None else ""

    def has_phone_number(self, phone_number: PhoneNumber) -> bool:
        return phone_number in self.phone_numbers

    def add_phone_number(self, phone_number: PhoneNumber) -> bool:
        """Append a phone number unless an equal one is already present."""
        if self.has_phone_number(phone_number):
            return False
        self.phone_numbers.append(phone_number)
        return True

    def remove_phone_number(self, phone_number: PhoneNumber) -> bool:
        """Remove the phone number equal to the given one, if present."""
        try:
            self.phone_numbers.remove(phone_number)
        except ValueError:
            return False
        return True

    def contains(self, query: Optional[str]) -> bool:
        """Check whether any name or phone field contains the query.

        Matching is a case-insensitive substring test over the last, first,
        middle and full name, each phone's raw number, and each phone type's
        enum name and display label. A blank query matches every subscriber.
        """
        if query is None or not query.strip():
            return True

        needle = query.strip().casefold()

        names = (self.last_name, self.first_name, self.middle_name, self.full_name)
        if any(needle in name.casefold() for name in names if name):
            return True

        for phone in self.phone_numbers:
            if phone.contains(needle) or phone.type.matches(needle):
                return True

        return False

    def is_valid(self) -> bool:
        """Check that the required name fields are non-blank."""
        return bool(self.last_name and self.last_name.strip()
                    and self.first_name and self.first_name.strip())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Subscriber):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __lt__(self, other: "Subscriber") -> bool:
        if not isinstance(other, Subscriber):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __le__(self, other: "Subscriber") -> bool:
        if not isinstance(other, Subscriber):
            return NotImplemented
        return self.sort_key <= other.sort_key

    def __gt__(self, other: "Subscriber") -> bool:
        if not isinstance(other, Subscriber):
            return NotImplemented
        return self.sort_key > other.sort_key

    def __ge__(self, other: "Subscriber") -> bool:
        if not isinstance(other, Subscriber):
            return NotImplemented
        return self.sort_key >= other.sort_key

    def __str__(self) -> str:
        return self.full_name


class DirectorySnapshot(BaseModel):
    """The full subscriber collection as persisted at one point in time."""

    version: int = Field(default=SNAPSHOT_VERSION, description="Snapshot format version")
    saved_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Timestamp when the snapshot was written"
    )
    subscribers: List[Subscriber] = Field(default_factory=list)
