"""
Tests for the ObjectId Generator

Verifies byte layout, counter monotonicity and wraparound, and that the
counter stays consistent under concurrent callers.

Fun fact: at one id per nanosecond the 24-bit counter would wrap every
16.7 milliseconds - which is why the timestamp has to do most of the work.
"""

import hashlib
import threading
from datetime import datetime, timezone

from prometheus_client import REGISTRY

from oidgen.generator import COUNTER_MASK, Generator, machine_fingerprint
from oidgen.kernel.identity import FixedProcessIdentity
from oidgen.kernel.settings import GeneratorSettings
from oidgen.kernel.time import TestTimeProvider

FIXED_SECONDS = 1736942400  # 2025-01-15T12:00:00Z


def wraps() -> float:
    return REGISTRY.get_sample_value("oidgen_counter_wraps_total") or 0.0


def generated() -> float:
    return REGISTRY.get_sample_value("oidgen_ids_generated_total") or 0.0


def test_machine_fingerprint_is_md5_prefix() -> None:
    assert machine_fingerprint("db-01") == hashlib.md5(b"db-01").digest()[:3]
    assert len(machine_fingerprint("")) == 3


def test_fingerprint_from_hostname_setting() -> None:
    generator = Generator(GeneratorSettings(hostname="db-01"))
    assert generator.machine_id == machine_fingerprint("db-01")


def test_explicit_fingerprint_wins_over_hostname() -> None:
    generator = Generator(GeneratorSettings(hostname="db-01", machine_fingerprint="010203"))
    assert generator.machine_id == b"\x01\x02\x03"


def test_default_generator_produces_12_bytes() -> None:
    assert len(Generator().next()) == 12


def test_generate_packs_layout(generator: Generator) -> None:
    data = generator.generate(FIXED_SECONDS, 0x010203)

    assert data == bytes.fromhex("6787a340" "abcdef" "1234" "010203")


def test_generate_truncates_fields(generator: Generator) -> None:
    data = generator.generate(0x1_0000_0001, 0x1_000005)

    assert data[0:4] == b"\x00\x00\x00\x01"
    assert data[9:12] == b"\x00\x00\x05"


def test_generate_does_not_consume_counter(generator: Generator) -> None:
    generator.generate(FIXED_SECONDS, 99)
    assert generator.counter == 0


def test_next_uses_time_provider(generator: Generator, test_time: TestTimeProvider) -> None:
    data = generator.next()
    assert int.from_bytes(data[0:4], "big") == FIXED_SECONDS

    test_time.advance_seconds(10)
    assert int.from_bytes(generator.next()[0:4], "big") == FIXED_SECONDS + 10


def test_next_with_explicit_time(generator: Generator) -> None:
    data = generator.next(datetime(2000, 1, 1, tzinfo=timezone.utc))
    assert int.from_bytes(data[0:4], "big") == 946684800

    data = generator.next(1234)
    assert int.from_bytes(data[0:4], "big") == 1234


def test_next_increments_counter_first(generator: Generator) -> None:
    first = generator.next()
    second = generator.next()

    assert first[9:12] == b"\x00\x00\x01"
    assert second[9:12] == b"\x00\x00\x02"
    assert generator.counter == 2


def test_successive_ids_same_second_are_distinct_and_increasing(generator: Generator) -> None:
    first = generator.next()
    second = generator.next()

    assert first != second
    assert first < second


def test_counter_wraps_to_zero(test_time: TestTimeProvider) -> None:
    generator = Generator(
        GeneratorSettings(machine_fingerprint="abcdef", initial_counter=COUNTER_MASK - 1),
        time_provider=test_time,
        identity=FixedProcessIdentity(0x1234),
    )
    wraps_before = wraps()

    last = generator.next()
    wrapped = generator.next()

    assert last[9:12] == b"\xff\xff\xff"
    assert wrapped[9:12] == b"\x00\x00\x00"
    # Known non-monotonic edge: the id after the wrap sorts first
    assert wrapped < last
    assert wraps() == wraps_before + 1


def test_counter_continues_after_wrap(test_time: TestTimeProvider) -> None:
    generator = Generator(
        GeneratorSettings(machine_fingerprint="abcdef", initial_counter=COUNTER_MASK),
        time_provider=test_time,
        identity=FixedProcessIdentity(0x1234),
    )

    counters = [int.from_bytes(generator.next()[9:12], "big") for _ in range(3)]

    assert counters == [0, 1, 2]


def test_concurrent_generation_yields_unique_counters(generator: Generator) -> None:
    per_thread = 500
    threads = 8
    results: list[bytes] = []
    lock = threading.Lock()

    def worker() -> None:
        local = [generator.next() for _ in range(per_thread)]
        with lock:
            results.extend(local)

    pool = [threading.Thread(target=worker) for _ in range(threads)]
    for t in pool:
        t.start()
    for t in pool:
        t.join()

    counters = {data[9:12] for data in results}
    assert len(results) == per_thread * threads
    assert len(counters) == per_thread * threads
    assert generator.counter == per_thread * threads


def test_generated_metric_incremented(generator: Generator) -> None:
    before = generated()
    generator.next()
    generator.next()
    assert generated() == before + 2
