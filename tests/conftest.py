"""Shared test helpers."""

import pytest

from ballotbox import ElectionRegistry

OWNER = "owner"


def make_election(
    registry: ElectionRegistry, name: str, candidates: list[str], start: bool = False
) -> int:
    """Create an election with the given candidates.

    Args:
        registry: Registry to create the election in (owned by OWNER)
        name: Election name
        candidates: Candidate names, added in order (ids 1..n)
        start: Whether to open the election for voting

    Returns:
        The new election id.
    """
    election_id = registry.create_election(OWNER, name)
    for candidate in candidates:
        registry.add_candidate(OWNER, election_id, candidate)
    if start:
        registry.start_election(OWNER, election_id)
    return election_id


@pytest.fixture
def registry():
    return ElectionRegistry(owner=OWNER)


@pytest.fixture
def board(registry):
    """Started election "Board" with candidates Alice (1) and Bob (2)."""
    return make_election(registry, "Board", ["Alice", "Bob"], start=True)
