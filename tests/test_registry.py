"""Tests for election creation, routing and the end-to-end flow."""

import threading

import pytest
from tests.conftest import OWNER, make_election

from ballotbox import ElectionRegistry
from ballotbox.errors import InvalidState, NotFound, PermissionDenied
from ballotbox.events import (
    CandidateAdded,
    ElectionClosed,
    ElectionCreated,
    ElectionStarted,
    VoteCast,
)
from ballotbox.models import ElectionInfo, Phase


class TestCreateElection:
    def test_sequential_ids(self, registry):
        assert registry.create_election(OWNER, "A") == 1
        assert registry.create_election(OWNER, "B") == 2
        assert registry.create_election(OWNER, "C") == 3
        assert registry.election_ids() == [1, 2, 3]
        assert registry.election_count == 3

    def test_non_owner_refused(self, registry):
        with pytest.raises(PermissionDenied):
            registry.create_election("mallory", "Rigged")
        assert registry.election_count == 0
        assert len(registry.events) == 0
        # Failed attempts do not consume ids
        assert registry.create_election(OWNER, "Real") == 1

    def test_emits_event(self, registry):
        election_id = registry.create_election(OWNER, "Board")
        [event] = list(registry.events)
        assert event == ElectionCreated(election_id=election_id, name="Board", sequence=1)

    def test_owner_fixed_at_construction(self):
        registry = ElectionRegistry(owner="chair")
        assert registry.owner == "chair"
        with pytest.raises(PermissionDenied):
            registry.create_election("owner", "E")


    def test_subscriber_may_read_registry(self, registry):
        seen = []
        registry.events.subscribe(lambda e: seen.append(registry.election_ids()))

        worker = threading.Thread(target=registry.create_election, args=(OWNER, "Board"))
        worker.start()
        worker.join(2)

        assert not worker.is_alive()
        assert seen == [[1]]


class TestGetElection:
    def test_fresh_election(self, registry):
        election_id = make_election(registry, "Board", ["A", "B"])
        assert registry.get_election(election_id) == ElectionInfo(
            id=election_id, name="Board", started=False, closed=False,
            total_votes=0, candidate_count=2,
        )

    def test_flags_follow_phase(self, board, registry):
        info = registry.get_election(board)
        assert (info.started, info.closed, info.phase) == (True, False, Phase.STARTED)
        registry.close_election(OWNER, board)
        info = registry.get_election(board)
        assert (info.started, info.closed, info.phase) == (True, True, Phase.CLOSED)

    @pytest.mark.parametrize("election_id", [0, 2, -1])
    def test_unknown_id(self, board, registry, election_id):
        with pytest.raises(NotFound) as exc_info:
            registry.get_election(election_id)
        assert exc_info.value.kind == "election"


class TestRouting:
    @pytest.mark.parametrize("call", [
        lambda r: r.add_candidate(OWNER, 9, "A"),
        lambda r: r.start_election(OWNER, 9),
        lambda r: r.close_election(OWNER, 9),
        lambda r: r.vote("x", 9, 1, 1),
    ])
    def test_unknown_election(self, registry, call):
        with pytest.raises(NotFound):
            call(registry)

    @pytest.mark.parametrize("call", [
        lambda r, e: r.create_election("mallory", "E"),
        lambda r, e: r.add_candidate("mallory", e, "C"),
        lambda r, e: r.start_election("mallory", e),
        lambda r, e: r.close_election("mallory", e),
    ])
    def test_admin_operations_refuse_non_owner(self, registry, call):
        election_id = make_election(registry, "E", ["A"])
        before = (registry.election_count, registry.get_election(election_id), len(registry.events))
        with pytest.raises(PermissionDenied):
            call(registry, election_id)
        after = (registry.election_count, registry.get_election(election_id), len(registry.events))
        assert before == after

    @pytest.mark.parametrize("call", [
        lambda r: r.add_candidate("mallory", 99, "A"),
        lambda r: r.start_election("mallory", 99),
        lambda r: r.close_election("mallory", 99),
    ])
    def test_non_owner_refused_for_unknown_election(self, registry, call):
        with pytest.raises(PermissionDenied):
            call(registry)

    def test_elections_are_independent(self, registry):
        first = make_election(registry, "First", ["A"], start=True)
        second = make_election(registry, "Second", ["A"])
        registry.vote("x", first, 1, 4)
        with pytest.raises(InvalidState):
            registry.vote("x", second, 1, 4)
        registry.close_election(OWNER, first)
        registry.start_election(OWNER, second)
        registry.vote("x", second, 1, 1)
        assert registry.get_election(first).total_votes == 4
        assert registry.get_election(second).total_votes == 1


class TestEndToEnd:
    def test_board_election(self, registry):
        election_id = registry.create_election(OWNER, "Board")
        assert registry.add_candidate(OWNER, election_id, "Alice") == 1
        assert registry.add_candidate(OWNER, election_id, "Bob") == 2
        registry.start_election(OWNER, election_id)

        registry.vote("X", election_id, 1, 3)
        registry.vote("Y", election_id, 2, 1)

        tally = registry.tally
        assert tally.get_total_votes(election_id) == 4
        assert tally.get_candidate_vote_percentage(election_id, 1) == 75
        assert tally.get_candidate_vote_percentage(election_id, 2) == 25

        registry.close_election(OWNER, election_id)
        with pytest.raises(InvalidState):
            registry.vote("X", election_id, 1, 1)
        assert tally.get_total_votes(election_id) == 4

        assert [type(e) for e in registry.events] == [
            ElectionCreated,
            CandidateAdded,
            CandidateAdded,
            ElectionStarted,
            VoteCast,
            VoteCast,
            ElectionClosed,
        ]
        assert [e.sequence for e in registry.events] == list(range(1, 8))
