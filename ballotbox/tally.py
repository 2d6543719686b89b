"""Read-only tallies over election ledgers."""

from typing import TYPE_CHECKING, Any, Hashable

from ballotbox.election import Election
from ballotbox.models import Candidate, Standing, percentage

if TYPE_CHECKING:
    from ballotbox.registry import ElectionRegistry


class TallyQuery:
    """Totals and percentages derived from an election's vote ledger.

    Queries never mutate state and need no administrator rights. Each query
    reads under the election's lock so the coupled counters are consistent.
    Unknown election ids raise NotFound; unknown candidate ids within a known
    election read as zero votes and an empty name.

    Percentages are integers truncated towards zero, so the percentages of
    all candidates need not add up to 100.
    """

    def __init__(self, registry: "ElectionRegistry"):
        self._registry = registry

    def _election(self, election_id: int) -> Election:
        return self._registry.lookup(election_id)

    def get_candidate_votes(self, election_id: int, candidate_id: int) -> int:
        election = self._election(election_id)
        with election.lock:
            return election.ledger.candidate_total(candidate_id)

    def get_candidate_vote_percentage(self, election_id: int, candidate_id: int) -> int:
        election = self._election(election_id)
        with election.lock:
            return percentage(
                election.ledger.candidate_total(candidate_id), election.total_votes
            )

    def get_total_votes(self, election_id: int) -> int:
        election = self._election(election_id)
        with election.lock:
            return election.total_votes

    def get_voter_total_votes(self, election_id: int, voter: Hashable) -> int:
        election = self._election(election_id)
        with election.lock:
            return election.ledger.voter_total(voter)

    def get_voter_candidate_votes(
        self, election_id: int, voter: Hashable, candidate_id: int
    ) -> int:
        election = self._election(election_id)
        with election.lock:
            return election.ledger.voter_candidate_total(voter, candidate_id)

    def get_voter_candidate_vote_percentage(
        self, election_id: int, voter: Hashable, candidate_id: int
    ) -> int:
        election = self._election(election_id)
        with election.lock:
            return percentage(
                election.ledger.voter_candidate_total(voter, candidate_id),
                election.ledger.voter_total(voter),
            )

    def get_candidates(self, election_id: int) -> list[Candidate]:
        """Return the election's candidates in id order."""
        return self._election(election_id).candidates

    def get_candidate_name(self, election_id: int, candidate_id: int) -> str:
        candidate = self._election(election_id).get_candidate(candidate_id)
        return candidate.name if candidate is not None else ""

    def get_standings(self, election_id: int) -> list[Standing]:
        """Rank the election's candidates by votes received.

        Candidates with equal votes share a rank and the next rank skips
        accordingly (1, 2, 2, 4). Within a tie, candidates keep id order.
        """
        election = self._election(election_id)
        with election.lock:
            return self._standings(election)

    def get_summary(self, election_id: int) -> dict[str, Any]:
        """Return a JSON-serializable snapshot of the election and its results."""
        election = self._election(election_id)
        with election.lock:
            info = election.info()
            total = election.total_votes
            return {
                **info.to_dict(),
                "candidates": [
                    {
                        **c.to_dict(),
                        "votes": election.ledger.candidate_total(c.id),
                        "percentage": percentage(election.ledger.candidate_total(c.id), total),
                    }
                    for c in election.candidates
                ],
                "standings": [s.to_dict() for s in self._standings(election)],
            }

    @staticmethod
    def _standings(election: Election) -> list[Standing]:
        total = election.total_votes

        # Group by votes
        vote_groups: dict[int, list[tuple[Candidate, int, int]]] = {}
        for candidate in election.candidates:
            votes = election.ledger.candidate_total(candidate.id)
            if votes not in vote_groups:
                vote_groups[votes] = []
            vote_groups[votes].append((candidate, votes, percentage(votes, total)))

        ordered = [vote_groups[v] for v in sorted(vote_groups, reverse=True)]
        return Standing.build_standings(ordered)
