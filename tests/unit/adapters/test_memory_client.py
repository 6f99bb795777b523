"""Unit tests specific to the in-memory StoreClient.

Behavior shared with other adapters lives in the contract suite; these tests
cover what only the in-memory store promises.
"""

from __future__ import annotations

import threading

from kvbench.adapters import InMemoryStoreClient
from kvbench.conformance import padded
from kvbench.interfaces import Status, as_record


def test_name():
    """The adapter reports itself as "memory"."""
    assert InMemoryStoreClient().name == "memory"


def test_instances_do_not_share_data():
    """Each instance is its own store."""
    a, b = InMemoryStoreClient(), InMemoryStoreClient()
    a.insert("t", "k", as_record({"f": b"x"}))

    assert b.read("t", "k").status is Status.NOT_FOUND


def test_returned_record_is_detached():
    """Draining a read result does not affect the stored bytes."""
    client = InMemoryStoreClient()
    client.insert("t", "k", as_record({"f": b"abc"}))

    client.read("t", "k").record["f"].read_all()

    assert client.read("t", "k").record["f"].read_all() == b"abc"


def test_close_keeps_data():
    """close() releases nothing; the instance stays usable."""
    client = InMemoryStoreClient()
    client.insert("t", "k", {})
    client.close()
    client.close()

    assert client.read("t", "k").found


def test_concurrent_inserts_are_all_kept():
    """Inserts from several threads all land and scan back in order."""
    client = InMemoryStoreClient()

    def worker(offset: int) -> None:
        for i in range(offset, 400, 4):
            client.insert("t", padded(i), as_record({"f": bytes([i % 256])}))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    result = client.scan("t", "", 1000)
    assert result.keys == [padded(i) for i in range(400)]


def test_concurrent_duplicate_insert_has_one_winner():
    """Racing inserts of one key produce exactly one OK."""
    client = InMemoryStoreClient()
    statuses: list[Status] = []
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        statuses.append(client.insert("t", "same", {}))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert statuses.count(Status.OK) == 1
    assert statuses.count(Status.ERROR) == 7
