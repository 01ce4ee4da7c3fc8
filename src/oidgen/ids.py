"""
ID factory - the composition-root view of ObjectId creation

Applications build one ObjectIdFactory at startup and pass it to whatever
needs new ids, rather than reaching for a process-wide generator.

Fun fact: Time-ordered ids make B-tree inserts land on the rightmost leaf,
which is why databases have shipped 12-byte ids like these for years.
"""

from datetime import datetime
from typing import Any, Protocol

from oidgen.generator import Generator
from oidgen.object_id import ObjectId


class IdFactory(Protocol):
    """Protocol for ID generation strategies"""

    def generate(self) -> ObjectId:
        """Generate a new unique ID"""
        ...


class ObjectIdFactory:
    """
    Creates ObjectIds from a single injected Generator

    Parsing helpers are included so call sites need only one collaborator.
    """

    def __init__(self, generator: Generator | None = None) -> None:
        """
        Args:
            generator: Generator to draw fresh ids from (a default one is built if omitted)
        """
        self.generator = generator or Generator()

    def new(self) -> ObjectId:
        """Fresh id stamped with the current time"""
        return ObjectId.generate(self.generator)

    def generate(self) -> ObjectId:
        return self.new()

    def from_time(self, time: datetime | int | float, unique: bool = False) -> ObjectId:
        """Time-based id; see ObjectId.from_time"""
        return ObjectId.from_time(time, unique=unique, generator=self.generator)

    def from_hex(self, value: str) -> ObjectId:
        return ObjectId.from_hex(value)

    def from_bytes(self, binary: bytes) -> ObjectId:
        return ObjectId.from_bytes(binary)

    def from_legacy(self, value: Any) -> ObjectId:
        return ObjectId.from_legacy(value)

    @staticmethod
    def is_legal(value: Any) -> bool:
        return ObjectId.is_legal(value)
