"""
Prometheus metrics collection for oidgen.

Counters only: generation is far too cheap to be worth a histogram.
"""

from prometheus_client import Counter

# ============================================================================
# Generation Metrics
# ============================================================================

ids_generated_total = Counter(
    "oidgen_ids_generated_total",
    "Total number of object ids generated",
)

counter_wraps_total = Counter(
    "oidgen_counter_wraps_total",
    "Total number of times the 24-bit generation counter wrapped to zero",
)

# ============================================================================
# Decoding Metrics
# ============================================================================

parse_failures_total = Counter(
    "oidgen_parse_failures_total",
    "Total number of rejected object id inputs",
    ["reason"],  # reason: hex, json, length, type, short_read
)

legacy_repairs_total = Counter(
    "oidgen_legacy_repairs_total",
    "Total number of legacy object id values normalized",
    ["form"],  # form: raw_bytes, byte_array, invalid
)
