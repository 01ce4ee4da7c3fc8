"""
Kernel - shared infrastructure for identifier generation

Errors, injectable time, process identity strategies and generator settings.
Nothing in here knows about the ObjectId byte layout.
"""

from oidgen.kernel.errors import InvalidIdentifier, MalformedLegacyData, OidError
from oidgen.kernel.identity import (
    FixedProcessIdentity,
    HashedTaskIdentity,
    OsProcessIdentity,
    ProcessIdentity,
    resolve_process_identity,
)
from oidgen.kernel.settings import GeneratorSettings
from oidgen.kernel.time import RealTimeProvider, TestTimeProvider, TimeProvider

__all__ = [
    # Errors
    "OidError",
    "InvalidIdentifier",
    "MalformedLegacyData",
    # Time
    "TimeProvider",
    "RealTimeProvider",
    "TestTimeProvider",
    # Process identity
    "ProcessIdentity",
    "OsProcessIdentity",
    "HashedTaskIdentity",
    "FixedProcessIdentity",
    "resolve_process_identity",
    # Settings
    "GeneratorSettings",
]
