"""Election registry: id allocation and routing of election operations."""

import logging
import threading
from typing import Hashable

from ballotbox.election import Election
from ballotbox.errors import NotFound
from ballotbox.events import ElectionCreated, EventLog
from ballotbox.gate import IdentityGate
from ballotbox.models import ElectionInfo
from ballotbox.tally import TallyQuery

logger = logging.getLogger(__name__)


class ElectionRegistry:
    """Holds every election run by one administrative owner.

    The owner is fixed at construction. Election ids are allocated
    sequentially from 1 and never reused. Each successful mutating call
    appends exactly one event to ``events``.

    Example:
        >>> registry = ElectionRegistry(owner="admin")
        >>> eid = registry.create_election("admin", "Board")
        >>> registry.add_candidate("admin", eid, "Alice")
        1
    """

    def __init__(self, owner: Hashable, event_log: EventLog | None = None):
        self.gate = IdentityGate(owner)
        self.events = event_log if event_log is not None else EventLog()
        self.tally = TallyQuery(self)
        self._elections: dict[int, Election] = {}
        self._next_id = 1
        self._lock = threading.RLock()

    @property
    def owner(self) -> Hashable:
        return self.gate.owner

    @property
    def election_count(self) -> int:
        return len(self._elections)

    def election_ids(self) -> list[int]:
        with self._lock:
            return list(self._elections)

    def lookup(self, election_id: int) -> Election:
        """Return the Election with the given id.

        Raises:
            NotFound: no election has that id
        """
        election = self._elections.get(election_id)
        if election is None:
            raise NotFound("election", election_id)
        return election

    def _admin_lookup(self, caller: Hashable, election_id: int, operation: str) -> Election:
        self.gate.require_admin(caller, operation)
        return self.lookup(election_id)

    # --- Administrative operations ---

    def create_election(self, caller: Hashable, name: str) -> int:
        """Create an election in the CREATED phase and return its id."""
        self.gate.require_admin(caller, "create_election")

        with self._lock:
            election_id = self._next_id
            election = Election(election_id, name, self.gate, self.events.append)
            self._elections[election_id] = election
            self._next_id += 1
            logger.info("Created election %d (%s)", election_id, name)
            self.events.append(ElectionCreated(election_id=election_id, name=name))

        return election_id

    def add_candidate(self, caller: Hashable, election_id: int, name: str) -> int:
        return self._admin_lookup(caller, election_id, "add_candidate").add_candidate(caller, name)

    def start_election(self, caller: Hashable, election_id: int) -> None:
        self._admin_lookup(caller, election_id, "start_election").start(caller)

    def close_election(self, caller: Hashable, election_id: int) -> None:
        self._admin_lookup(caller, election_id, "close_election").close(caller)

    # --- Voting ---

    def vote(
        self,
        caller: Hashable,
        election_id: int,
        candidate_id: int,
        num_votes: int,
    ) -> None:
        self.lookup(election_id).vote(caller, candidate_id, num_votes)

    # --- Queries ---

    def get_election(self, election_id: int) -> ElectionInfo:
        """Return name, phase flags and vote total for an election.

        Raises:
            NotFound: no election has that id
        """
        return self.lookup(election_id).info()
