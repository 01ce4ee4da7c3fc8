"""
ObjectId - immutable 12-byte identifier

An ObjectId is nothing more than its 12 bytes. Equality, ordering and
hashing all work on those bytes directly, so ids from one process sort in
generation order (the timestamp sits in the most significant bytes).

Values that were serialized by older code may show up as a list of 12
small integers instead of a byte string. Those are normalized eagerly, at
construction, by ``ObjectId.from_legacy`` (and by unpickling) - an ObjectId
instance is always canonical.
"""

import json
import re
from collections.abc import Sequence
from datetime import datetime, timezone
from enum import Enum
from functools import total_ordering
from typing import TYPE_CHECKING, Any, BinaryIO, Protocol, runtime_checkable

from pydantic_core import core_schema

from oidgen.kernel import metrics
from oidgen.kernel.errors import InvalidIdentifier, MalformedLegacyData
from oidgen.kernel.logging import get_logger
from oidgen.kernel.time import to_epoch_seconds

if TYPE_CHECKING:
    from oidgen.generator import Generator

logger = get_logger(__name__)

OBJECT_ID_SIZE = 12
_HEX_PATTERN = re.compile(r"[0-9a-fA-F]{24}")


@runtime_checkable
class HexIdentifier(Protocol):
    """
    Anything that can render itself as a canonical 24-character hex id

    ObjectId compares equal to (and orders against) such values by hex
    string. Plain ``str`` is deliberately not accepted.

    Equality does not carry over to hashing: an ObjectId and an equal
    HexIdentifier generally hash differently, so do not mix the two in a
    set or as keys of the same dict.
    """

    def to_hex(self) -> str:
        ...


class LegacyForm(str, Enum):
    """Shapes an incoming legacy value can take"""

    RAW_BYTES = "raw_bytes"
    BYTE_ARRAY = "byte_array"
    INVALID = "invalid"


def classify_legacy(value: Any) -> LegacyForm:
    """
    Tag a legacy value with the form it arrived in

    Args:
        value: Candidate identifier data

    Returns:
        RAW_BYTES for a 12-byte buffer, BYTE_ARRAY for 12 ints in 0..255,
        INVALID for anything else
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        # memoryview len() counts items, not bytes
        size = memoryview(value).nbytes
        return LegacyForm.RAW_BYTES if size == OBJECT_ID_SIZE else LegacyForm.INVALID

    if (
        isinstance(value, Sequence)
        and not isinstance(value, str)
        and len(value) == OBJECT_ID_SIZE
        and all(
            isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 0xFF
            for b in value
        )
    ):
        return LegacyForm.BYTE_ARRAY

    return LegacyForm.INVALID


def normalize_legacy(value: Any) -> bytes:
    """
    Convert legacy identifier data into canonical 12 bytes

    Idempotent: canonical bytes come back unchanged.

    Raises:
        MalformedLegacyData: If the value is neither supported form
    """
    form = classify_legacy(value)
    metrics.legacy_repairs_total.labels(form=form.value).inc()

    if form is LegacyForm.INVALID:
        logger.debug("Rejected legacy object id data", value=repr(value))
        raise MalformedLegacyData(value)
    return bytes(value)


def _reject(value: Any, reason: str, message: str = "") -> InvalidIdentifier:
    metrics.parse_failures_total.labels(reason=reason).inc()
    logger.debug("Rejected object id input", reason=reason, value=repr(value))
    return InvalidIdentifier(value, message)


@total_ordering
class ObjectId:
    """
    Immutable 12-byte document identifier

    Layout (big-endian): 4-byte timestamp, 3-byte machine fingerprint,
    2-byte process id, 3-byte counter.

    Construct through the classmethods (``from_hex``, ``from_bytes``,
    ``from_time``, ``from_legacy``, ``generate``) or directly from
    12 bytes.
    """

    __slots__ = ("_data",)

    def __init__(self, binary: bytes) -> None:
        if not isinstance(binary, (bytes, bytearray, memoryview)):
            raise _reject(binary, "type", f"ObjectId requires 12 bytes, got {type(binary).__name__}")
        data = bytes(binary)
        if len(data) != OBJECT_ID_SIZE:
            raise _reject(
                binary, "length", f"ObjectId requires exactly 12 bytes, got {len(data)}"
            )
        object.__setattr__(self, "_data", data)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("ObjectId is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("ObjectId is immutable")

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_bytes(cls, binary: bytes) -> "ObjectId":
        """Create from exactly 12 raw bytes (stored verbatim)"""
        return cls(binary)

    @classmethod
    def from_hex(cls, value: str) -> "ObjectId":
        """
        Create from a 24-character hex string (any case)

        Raises:
            InvalidIdentifier: If the string is not exactly 24 hex characters
        """
        if not cls.is_legal(value):
            raise _reject(value, "hex")
        return cls(bytes.fromhex(value))

    @classmethod
    def from_time(
        cls,
        time: datetime | int | float,
        unique: bool = False,
        generator: "Generator | None" = None,
    ) -> "ObjectId":
        """
        Create an id for a point in time

        Without ``unique`` only the timestamp is set and the other 8 bytes
        are zero, which makes the result a lower bound for range queries
        ("all ids generated at or after T").

        Args:
            time: datetime (naive treated as UTC) or epoch seconds
            unique: Fill machine/process/counter fields and consume a counter tick
            generator: Generator to draw from; required when unique is True

        Returns:
            New ObjectId
        """
        if unique:
            if generator is None:
                raise ValueError("a Generator is required for unique time-based ids")
            return cls(generator.next(time))
        seconds = to_epoch_seconds(time) & 0xFFFFFFFF
        return cls(seconds.to_bytes(4, "big") + bytes(8))

    @classmethod
    def generate(cls, generator: "Generator") -> "ObjectId":
        """Create a fresh id from the generator's current time"""
        return cls(generator.next())

    @classmethod
    def from_legacy(cls, value: Any) -> "ObjectId":
        """
        Create from data serialized by older code

        Accepts a 12-byte buffer or a sequence of 12 integers (0-255).

        Raises:
            MalformedLegacyData: For any other shape or length
        """
        return cls(normalize_legacy(value))

    @classmethod
    def read_from(cls, stream: BinaryIO) -> "ObjectId":
        """
        Read exactly 12 bytes from a binary stream

        Raises:
            InvalidIdentifier: If fewer than 12 bytes are available
        """
        data = stream.read(OBJECT_ID_SIZE)
        if len(data) != OBJECT_ID_SIZE:
            raise _reject(
                data, "short_read", f"Expected 12 bytes for ObjectId, got {len(data)}"
            )
        return cls(data)

    @staticmethod
    def is_legal(value: Any) -> bool:
        """True if value is a string of exactly 24 hexadecimal characters"""
        return isinstance(value, str) and _HEX_PATTERN.fullmatch(value) is not None

    # -------------------------------------------------------------------------
    # Rendering and fields
    # -------------------------------------------------------------------------

    @property
    def binary(self) -> bytes:
        """The raw 12 bytes"""
        return self._data

    def __bytes__(self) -> bytes:
        return self._data

    def to_hex(self) -> str:
        """24 lowercase hex characters"""
        return self._data.hex()

    def to_json(self) -> str:
        """Extended JSON form: {"$oid": "<hex>"}"""
        return f'{{"$oid": "{self.to_hex()}"}}'

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"ObjectId('{self.to_hex()}')"

    @property
    def generation_time(self) -> datetime:
        """Time encoded in the first 4 bytes, as an aware UTC datetime"""
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)

    @property
    def timestamp(self) -> int:
        return int.from_bytes(self._data[0:4], "big")

    @property
    def machine_id(self) -> bytes:
        return self._data[4:7]

    @property
    def process_id(self) -> int:
        return int.from_bytes(self._data[7:9], "big")

    @property
    def counter(self) -> int:
        return int.from_bytes(self._data[9:12], "big")

    # -------------------------------------------------------------------------
    # Comparison and hashing
    # -------------------------------------------------------------------------

    def _keys(self, other: Any) -> tuple[Any, Any] | None:
        if isinstance(other, ObjectId):
            return self._data, other._data
        if isinstance(other, HexIdentifier):
            return self.to_hex(), other.to_hex()
        return None

    def __eq__(self, other: object) -> bool:
        keys = self._keys(other)
        if keys is None:
            return NotImplemented
        return keys[0] == keys[1]

    def __lt__(self, other: object) -> bool:
        keys = self._keys(other)
        if keys is None:
            return NotImplemented
        return keys[0] < keys[1]

    def __hash__(self) -> int:
        return hash(self._data)

    # -------------------------------------------------------------------------
    # Pickle and pydantic integration
    # -------------------------------------------------------------------------

    def __getstate__(self) -> bytes:
        return self._data

    def __setstate__(self, state: Any) -> None:
        # Older pickles carried the attribute dict, possibly with a list of ints
        if isinstance(state, tuple) and len(state) == 2 and state[0] is None:
            state = state[1]
        if isinstance(state, dict):
            state = state.get("_data", state)
        object.__setattr__(self, "_data", normalize_legacy(state))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: Any
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _validate(cls, value: Any) -> "ObjectId":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_hex(value)
        if isinstance(value, dict) and set(value) == {"$oid"}:
            return cls.from_hex(value["$oid"])
        try:
            return cls.from_legacy(value)
        except MalformedLegacyData as exc:
            raise ValueError(str(exc)) from exc


def parse_json(text: str) -> ObjectId:
    """
    Parse the {"$oid": "<hex>"} form produced by ObjectId.to_json

    Raises:
        InvalidIdentifier: If the document is not exactly that shape
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise _reject(text, "json") from exc
    if not isinstance(document, dict) or set(document) != {"$oid"}:
        raise _reject(text, "json")
    return ObjectId.from_hex(document["$oid"])
