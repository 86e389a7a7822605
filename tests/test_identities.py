# tests/test_identities.py

from __future__ import annotations

import threading

import pytest

from taskbot.connectors.identities import IdentityDirectory, username_from_mxid


@pytest.mark.parametrize(
    ("mxid", "expected"),
    [("@alice:example.org", "alice"), ("@bob", "bob"), ("carol:srv", "carol"), ("@:srv", "@:srv")],
)
def test_username_from_mxid(mxid: str, expected: str) -> None:
    assert username_from_mxid(mxid) == expected


def test_identities_are_stable_and_never_zero() -> None:
    d = IdentityDirectory()

    alice = d.identify("@alice:example.org")
    bob = d.identify("@bob:example.org")

    assert alice.user_id == 1
    assert bob.user_id == 2
    assert d.identify("@alice:example.org") == alice
    assert d.mxid_for(2) == "@bob:example.org"
    assert d.mxid_for(99) is None


def test_last_room_is_remembered() -> None:
    d = IdentityDirectory()
    alice = d.identify("@alice:example.org", room_id="!a:example.org")

    assert d.room_for(alice.user_id) == "!a:example.org"

    d.identify("@alice:example.org", room_id="!b:example.org")
    assert d.room_for(alice.user_id) == "!b:example.org"

    # No room given: keep the previous one.
    d.identify("@alice:example.org")
    assert d.room_for(alice.user_id) == "!b:example.org"
    assert d.room_for(42) is None


def test_concurrent_registration_gives_one_id_per_user() -> None:
    d = IdentityDirectory()
    barrier = threading.Barrier(8)
    seen: list[int] = []
    lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        for n in range(100):
            ident = d.identify(f"@user{n}:srv")
            with lock:
                seen.append(ident.user_id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(set(seen)) == list(range(1, 101))
