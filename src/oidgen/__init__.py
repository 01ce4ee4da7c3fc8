"""
oidgen - 12-byte time-ordered document identifiers

Generates, parses and compares ObjectIds: 4-byte timestamp, 3-byte machine
fingerprint, 2-byte process id and 3-byte counter.

Fun fact: 2^32 seconds after 1970 lands in February 2106 - that is when the
timestamp field finally wraps.
"""

from oidgen.generator import Generator
from oidgen.ids import IdFactory, ObjectIdFactory
from oidgen.kernel.errors import InvalidIdentifier, MalformedLegacyData, OidError
from oidgen.object_id import HexIdentifier, ObjectId

__version__ = "0.1.0"
__all__ = [
    "Generator",
    "HexIdentifier",
    "IdFactory",
    "InvalidIdentifier",
    "MalformedLegacyData",
    "ObjectId",
    "ObjectIdFactory",
    "OidError",
    "__version__",
]
