"""
Process identity providers

Every generated id carries 16 bits identifying the process that made it.
Where the OS hands out real pids that is simply the low half of the pid;
interpreters without a stable pid fall back to hashing process and thread
identity together. The fallback is only "reasonably distinct within one
host" and makes no uniqueness or security promise.
"""

import os
import threading
from typing import Literal, Protocol

IDENTITY_MASK = 0xFFFF


class ProcessIdentity(Protocol):
    """Protocol for 16-bit process identity strategies"""

    name: str

    def current(self) -> int:
        """Return the identity of the calling process/task (0..0xFFFF)"""
        ...


class OsProcessIdentity:
    """Low 16 bits of the operating system process id"""

    name = "os"

    def current(self) -> int:
        return os.getpid() & IDENTITY_MASK


class HashedTaskIdentity:
    """
    Hash of process id and calling thread folded into 16 bits

    Different threads of one process get different values, so ids from
    concurrent callers stay apart even if the pid is unreliable.
    """

    name = "hashed"

    def current(self) -> int:
        pid = os.getpid() if hasattr(os, "getpid") else 0
        return hash(f"{pid}{threading.get_ident()}") % IDENTITY_MASK


class FixedProcessIdentity:
    """Constant identity, for tests that need byte-exact output"""

    name = "fixed"

    def __init__(self, value: int) -> None:
        if not 0 <= value <= IDENTITY_MASK:
            raise ValueError(f"process identity must fit in 16 bits, got {value}")
        self.value = value

    def current(self) -> int:
        return self.value


def has_native_pid() -> bool:
    """True when the platform exposes a usable OS process id."""
    try:
        return os.getpid() > 0
    except (AttributeError, OSError):
        return False


def resolve_process_identity(
    strategy: Literal["auto", "os", "hashed"] = "auto",
) -> ProcessIdentity:
    """
    Pick a process identity provider

    Args:
        strategy: "os", "hashed", or "auto" (OS pid when available)

    Returns:
        Provider instance
    """
    if strategy == "os":
        return OsProcessIdentity()
    if strategy == "hashed":
        return HashedTaskIdentity()
    return OsProcessIdentity() if has_native_pid() else HashedTaskIdentity()
