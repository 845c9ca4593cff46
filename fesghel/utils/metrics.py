"""Prometheus metrics of the URL shortener

All metrics live in a dedicated `REGISTRY` (not prometheus_client's global
one), which the metrics lambda renders in the text exposition format.

Metrics:
    fesghel_app_info                    build information (version label)
    fesghel_urls_created_total          short URLs created
    fesghel_errors_total{type}          errors by type: duplicate_key, database, validation
    fesghel_db_reads_total              data store reads
    fesghel_db_writes_total             data store writes
    fesghel_db_read_duration_seconds    histogram of read durations
    fesghel_db_write_duration_seconds   histogram of write durations

Example:
    >>> from fesghel.utils import metrics
    >>> with metrics.time_db_read():
    ...     document = await collection.find_one({'key': 'abc123'})
    >>> metrics.inc_error(metrics.DUPLICATE_KEY)
"""

import time
from contextlib import contextmanager
from collections.abc import Iterator

from prometheus_client import CollectorRegistry, Counter, Histogram, Info, generate_latest, CONTENT_TYPE_LATEST

from fesghel import __version__


__all__ = [
    'REGISTRY',
    'CONTENT_TYPE',
    'DUPLICATE_KEY',
    'DATABASE',
    'VALIDATION',
    'inc_urls_created',
    'inc_error',
    'observe_db_read',
    'observe_db_write',
    'time_db_read',
    'time_db_write',
    'render',
]

# Error types (values of the `type` label)
DUPLICATE_KEY = 'duplicate_key'
DATABASE = 'database'
VALIDATION = 'validation'

# Tuned for single-document operations
DB_DURATION_BUCKETS = (0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0)

CONTENT_TYPE = CONTENT_TYPE_LATEST

REGISTRY = CollectorRegistry()

APP_INFO = Info('fesghel_app', 'Application build information', registry=REGISTRY)
APP_INFO.info({'version': __version__})

URLS_CREATED = Counter('fesghel_urls_created', 'Total number of shortened URLs created', registry=REGISTRY)
ERRORS = Counter('fesghel_errors', 'Total number of errors by type', ['type'], registry=REGISTRY)

DB_READS = Counter('fesghel_db_reads', 'Total number of database read operations', registry=REGISTRY)
DB_WRITES = Counter('fesghel_db_writes', 'Total number of database write operations', registry=REGISTRY)
DB_READ_DURATION = Histogram(
    'fesghel_db_read_duration_seconds',
    'Database read operation duration in seconds',
    buckets=DB_DURATION_BUCKETS,
    registry=REGISTRY,
)
DB_WRITE_DURATION = Histogram(
    'fesghel_db_write_duration_seconds',
    'Database write operation duration in seconds',
    buckets=DB_DURATION_BUCKETS,
    registry=REGISTRY,
)


def inc_urls_created() -> None:
    URLS_CREATED.inc()


def inc_error(error_type: str) -> None:
    ERRORS.labels(type=error_type).inc()


def observe_db_read(duration_seconds: float) -> None:
    DB_READS.inc()
    DB_READ_DURATION.observe(duration_seconds)


def observe_db_write(duration_seconds: float) -> None:
    DB_WRITES.inc()
    DB_WRITE_DURATION.observe(duration_seconds)


@contextmanager
def time_db_read() -> Iterator[None]:
    """Count a read and observe its duration, whether it succeeds or raises"""
    start = time.perf_counter()
    try:
        yield
    finally:
        observe_db_read(time.perf_counter() - start)


@contextmanager
def time_db_write() -> Iterator[None]:
    """Count a write and observe its duration, whether it succeeds or raises"""
    start = time.perf_counter()
    try:
        yield
    finally:
        observe_db_write(time.perf_counter() - start)


def render() -> str:
    """Render REGISTRY in the Prometheus text exposition format"""
    return generate_latest(REGISTRY).decode('utf-8')
