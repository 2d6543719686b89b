"""Election lifecycle state machine and vote ledger."""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable

from ballotbox.errors import InvalidState, NotFound
from ballotbox.events import (
    CandidateAdded,
    ElectionClosed,
    ElectionStarted,
    Event,
    VoteCast,
)
from ballotbox.gate import IdentityGate
from ballotbox.models import Candidate, ElectionInfo, Phase

logger = logging.getLogger(__name__)


@dataclass
class VoteLedger:
    """Vote counters for one election.

    Attributes:
        candidate_votes: candidate_id -> votes
        voter_total_votes: voter -> votes cast across all candidates
        voter_candidate_votes: (voter, candidate_id) -> votes
    """
    candidate_votes: dict[int, int] = field(default_factory=dict)
    voter_total_votes: dict[Hashable, int] = field(default_factory=dict)
    voter_candidate_votes: dict[tuple[Hashable, int], int] = field(default_factory=dict)

    def open_candidate(self, candidate_id: int) -> None:
        self.candidate_votes[candidate_id] = 0

    def record(self, voter: Hashable, candidate_id: int, num_votes: int) -> None:
        self.candidate_votes[candidate_id] = self.candidate_votes.get(candidate_id, 0) + num_votes
        self.voter_total_votes[voter] = self.voter_total_votes.get(voter, 0) + num_votes
        key = (voter, candidate_id)
        self.voter_candidate_votes[key] = self.voter_candidate_votes.get(key, 0) + num_votes

    def candidate_total(self, candidate_id: int) -> int:
        return self.candidate_votes.get(candidate_id, 0)

    def voter_total(self, voter: Hashable) -> int:
        return self.voter_total_votes.get(voter, 0)

    def voter_candidate_total(self, voter: Hashable, candidate_id: int) -> int:
        return self.voter_candidate_votes.get((voter, candidate_id), 0)


class Election:
    """One independently tallied voting process.

    Candidates may only be added while the election is CREATED and votes may
    only be recorded while it is STARTED. Every operation, including reads,
    runs under the election's lock, so callers never observe a partially
    applied vote.

    Elections are created by ElectionRegistry; administrative checks go
    through the registry's IdentityGate and events are handed to ``emit``.
    """

    def __init__(
        self,
        election_id: int,
        name: str,
        gate: IdentityGate,
        emit: Callable[[Event], Any],
    ):
        self.id = election_id
        self.name = name
        self._gate = gate
        self._emit = emit
        self._phase = Phase.CREATED
        self._candidates: list[Candidate] = []
        self._total_votes = 0
        self.ledger = VoteLedger()
        self.lock = threading.RLock()

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def total_votes(self) -> int:
        return self._total_votes

    @property
    def candidate_count(self) -> int:
        return len(self._candidates)

    @property
    def candidates(self) -> list[Candidate]:
        with self.lock:
            return list(self._candidates)

    def info(self) -> ElectionInfo:
        with self.lock:
            return ElectionInfo(
                id=self.id,
                name=self.name,
                started=self._phase is not Phase.CREATED,
                closed=self._phase is Phase.CLOSED,
                total_votes=self._total_votes,
                candidate_count=len(self._candidates),
            )

    def has_candidate(self, candidate_id: int) -> bool:
        return 1 <= candidate_id <= len(self._candidates)

    def get_candidate(self, candidate_id: int) -> Candidate | None:
        with self.lock:
            if not self.has_candidate(candidate_id):
                return None
            return self._candidates[candidate_id - 1]

    def _require_phase(self, phase: Phase, operation: str) -> None:
        if self._phase is not phase:
            raise InvalidState(self.id, self._phase, operation)

    def add_candidate(self, caller: Hashable, name: str) -> int:
        """Register a candidate and return its id (1, 2, ... within this election).

        Raises:
            PermissionDenied: caller is not the owner
            InvalidState: the election has already been started
        """
        with self.lock:
            self._gate.require_admin(caller, "add_candidate")
            self._require_phase(Phase.CREATED, "add a candidate to")

            candidate = Candidate(id=len(self._candidates) + 1, name=name)
            self._candidates.append(candidate)
            self.ledger.open_candidate(candidate.id)
            logger.debug("Election %d: added candidate %d (%s)", self.id, candidate.id, name)
            self._emit(CandidateAdded(
                election_id=self.id, candidate_id=candidate.id, name=name,
            ))
            return candidate.id

    def start(self, caller: Hashable) -> None:
        with self.lock:
            self._gate.require_admin(caller, "start_election")
            self._require_phase(Phase.CREATED, "start")

            self._phase = Phase.STARTED
            logger.info("Election %d (%s) started with %d candidates",
                        self.id, self.name, len(self._candidates))
            self._emit(ElectionStarted(election_id=self.id))

    def close(self, caller: Hashable) -> None:
        with self.lock:
            self._gate.require_admin(caller, "close_election")
            self._require_phase(Phase.STARTED, "close")

            self._phase = Phase.CLOSED
            logger.info("Election %d (%s) closed with %d votes",
                        self.id, self.name, self._total_votes)
            self._emit(ElectionClosed(election_id=self.id))

    def vote(self, caller: Hashable, candidate_id: int, num_votes: int) -> None:
        """Record num_votes for candidate_id on behalf of caller.

        Any caller may vote, any number of times, with any non-negative
        weight.

        Raises:
            InvalidState: the election is not STARTED
            NotFound: candidate_id is not one of this election's candidates
            ValueError: num_votes is not a non-negative integer
        """
        if isinstance(num_votes, bool) or not isinstance(num_votes, int):
            raise ValueError(f"num_votes must be an integer, got {num_votes!r}")
        if num_votes < 0:
            raise ValueError(f"num_votes must not be negative, got {num_votes}")

        with self.lock:
            self._require_phase(Phase.STARTED, "vote in")
            if not self.has_candidate(candidate_id):
                raise NotFound("candidate", candidate_id)

            self.ledger.record(caller, candidate_id, num_votes)
            self._total_votes += num_votes
            logger.debug("Election %d: %r cast %d vote(s) for candidate %d",
                         self.id, caller, num_votes, candidate_id)
            self._emit(VoteCast(
                election_id=self.id,
                candidate_id=candidate_id,
                caller=caller,
                num_votes=num_votes,
            ))

    def __repr__(self) -> str:
        return f"<Election {self.id} {self.name!r} {self._phase}>"
