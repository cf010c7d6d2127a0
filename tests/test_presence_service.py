"""Unit tests for operator presence tracking."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from fleetsync.services.presence_service import PresenceTracker


class TestPresenceTracker:
    def test_join_creates_operator(self):
        presence = PresenceTracker()

        operator = presence.join("Ana", "conn-1")

        assert operator.name == "Ana"
        assert operator.connection_id == "conn-1"
        assert presence.list() == [operator]

    def test_same_name_replaces_previous_session(self):
        presence = PresenceTracker()
        first = presence.join("Ana", "conn-1")

        second = presence.join("Ana", "conn-2")

        operators = presence.list()
        assert operators == [second]
        assert second.id != first.id
        assert presence.by_connection("conn-1") is None

    def test_rejoin_under_new_name_replaces_connection_identity(self):
        presence = PresenceTracker()
        presence.join("Ana", "conn-1")
        renamed = presence.join("Ana2", "conn-1")

        assert presence.list() == [renamed]

        assert presence.leave("conn-1") == renamed
        assert presence.list() == []

    def test_leave_by_connection(self):
        presence = PresenceTracker()
        presence.join("Ana", "conn-1")
        bob = presence.join("Bob", "conn-2")

        removed = presence.leave("conn-1")

        assert removed.name == "Ana"
        assert presence.list() == [bob]

    def test_leave_unknown_connection_is_noop(self):
        presence = PresenceTracker()
        presence.join("Ana", "conn-1")

        assert presence.leave("ghost") is None
        assert len(presence.list()) == 1

    def test_touch_refreshes_last_active(self):
        presence = PresenceTracker()
        operator = presence.join("Ana", "conn-1")
        joined_at = operator.last_active

        presence.touch("conn-1")

        assert operator.last_active >= joined_at

    def test_clear(self):
        presence = PresenceTracker()
        presence.join("Ana", "conn-1")
        presence.join("Bob", "conn-2")

        presence.clear()

        assert presence.list() == []
