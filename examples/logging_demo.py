#!/usr/bin/env python3
"""
Demonstration of datastore's structured logging.

Shows JSON logs with correlation IDs and the cache events emitted by the
metrics logger, including a write-back that fails.
"""

from datastore import CacheStore, InMemoryPersistentStore, SaveError
from datastore.utils.logging import get_logger, with_correlation_id
from datastore.utils.logging_config import LoggingPresets


class FlakyStore(InMemoryPersistentStore):
    """A store that refuses to save one key."""

    def save(self, key: str, value: str) -> bool:
        if key == "broken":
            raise SaveError(f"Refusing to save {key}")
        return super().save(key, value)


def main():
    LoggingPresets.development(log_file="logs/datastore_demo.log")
    logger = get_logger("datastore.demo")

    failures = []
    with CacheStore(capacity=1, backing_store=FlakyStore(), on_failure=failures.append) as cache:
        with with_correlation_id("demo-run") as correlation_id:
            logger.info("Starting demo", extra={"run": correlation_id})
            cache.put("broken", "value")
            cache.get("broken")
            cache.put("fine", "value")  # evicts 'broken', whose write-back fails

    print(f"\nRecorded failures: {failures}")


if __name__ == "__main__":
    main()
