"""Core data models for elections, candidates and tallies."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Self


class Phase(str, Enum):
    """Lifecycle phase of an election.

    Phases only move forward: CREATED -> STARTED -> CLOSED.
    """
    CREATED = "created"
    STARTED = "started"
    CLOSED = "closed"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Candidate:
    """An option voters can allocate votes to.

    Attributes:
        id: Sequential id, starting at 1, scoped to the owning election
        name: Display name
    """
    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class ElectionInfo:
    """Read-only summary of one election.

    Attributes:
        id: Election id allocated by the registry
        name: Election name
        started: Whether voting has been opened (stays True once closed)
        closed: Whether voting has been closed for good
        total_votes: Sum of all votes recorded
        candidate_count: Number of candidates registered
    """
    id: int
    name: str
    started: bool
    closed: bool
    total_votes: int
    candidate_count: int = 0

    @property
    def phase(self) -> Phase:
        if self.closed:
            return Phase.CLOSED
        if self.started:
            return Phase.STARTED
        return Phase.CREATED

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "phase": self.phase.value,
            "started": self.started,
            "closed": self.closed,
            "total_votes": self.total_votes,
            "candidate_count": self.candidate_count,
        }


@dataclass(frozen=True)
class Standing:
    """A candidate's position in an election's results.

    Attributes:
        candidate: The candidate
        votes: Votes recorded for the candidate
        percentage: Truncated integer share of the election's total votes
        rank: 1-indexed rank (candidates with equal votes share a rank)
        tied: Whether this candidate shares its rank with others
    """
    candidate: Candidate
    votes: int
    percentage: int
    rank: int
    tied: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "candidate_id": self.candidate.id,
            "name": self.candidate.name,
            "votes": self.votes,
            "percentage": self.percentage,
            "rank": self.rank,
            "tied": self.tied,
        }

    @classmethod
    def build_standings(
        cls, groups: list[list[tuple[Candidate, int, int]]]
    ) -> list[Self]:
        """Build a list of Standings from ordered groups.

        Args:
            groups: Groups of (candidate, votes, percentage) in order from
                first to last place. Candidates within one group are tied.

        Returns:
            List of Standing objects with correct ranks and tied flags.
        """
        standings = []
        rank = 1
        for group in groups:
            tied = len(group) > 1
            for candidate, votes, percentage in group:
                standings.append(cls(
                    candidate=candidate,
                    votes=votes,
                    percentage=percentage,
                    rank=rank,
                    tied=tied,
                ))
            rank += len(group)

        return standings


def percentage(part: int, whole: int) -> int:
    """Integer percentage of part in whole, truncated; 0 when whole is 0."""
    if whole == 0:
        return 0
    return part * 100 // whole
