"""
Pytest configuration and shared fixtures

Generators built here are fully pinned: fixed fingerprint, fixed process
identity and a controllable clock, so tests can assert on exact bytes.
"""

from datetime import datetime, timezone

import pytest

from oidgen.generator import Generator
from oidgen.ids import ObjectIdFactory
from oidgen.kernel.identity import FixedProcessIdentity
from oidgen.kernel.settings import GeneratorSettings
from oidgen.kernel.time import TestTimeProvider


@pytest.fixture
def test_time() -> TestTimeProvider:
    """
    Provide a controllable time provider for deterministic tests

    Default time: 2025-01-15 12:00:00 UTC (epoch seconds 1736942400)
    """
    return TestTimeProvider(datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings() -> GeneratorSettings:
    return GeneratorSettings(machine_fingerprint="abcdef")


@pytest.fixture
def generator(settings: GeneratorSettings, test_time: TestTimeProvider) -> Generator:
    """Generator with fingerprint abcdef, process id 0x1234 and a frozen clock"""
    return Generator(settings, time_provider=test_time, identity=FixedProcessIdentity(0x1234))


@pytest.fixture
def factory(generator: Generator) -> ObjectIdFactory:
    return ObjectIdFactory(generator)
