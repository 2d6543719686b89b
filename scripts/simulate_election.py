"""Run a simulated election and print its results.

Creates an election with fake candidate names, opens it, casts randomly
weighted votes from fake voters, closes it and prints the summary as JSON.
Names are generated with faker using a fixed seed, so runs are repeatable.

Usage:
    python scripts/simulate_election.py
    python scripts/simulate_election.py --candidates 5 --voters 200 --seed 7
    python scripts/simulate_election.py -v --events
"""

import argparse
import json
import logging
import random
import sys
from pathlib import Path

from faker import Faker

sys.path.insert(0, str(Path(__file__).parent.parent))

from ballotbox import ElectionRegistry

OWNER = "returning-officer"
SEED = 20260201


def simulate(
    name: str,
    num_candidates: int,
    num_voters: int,
    max_weight: int = 5,
    seed: int = SEED,
) -> tuple[ElectionRegistry, int]:
    """Run one election from creation to close.

    Each fake voter casts between one and three ballots, each for a random
    candidate with a random weight between 1 and max_weight.

    Returns:
        (registry, election_id) for the closed election.
    """
    fake = Faker()
    fake.seed_instance(seed)
    rng = random.Random(seed)

    registry = ElectionRegistry(owner=OWNER)
    election_id = registry.create_election(OWNER, name)

    for _ in range(num_candidates):
        registry.add_candidate(OWNER, election_id, fake.unique.name())

    registry.start_election(OWNER, election_id)

    voters = [fake.unique.user_name() for _ in range(num_voters)]
    for voter in voters:
        for _ in range(rng.randint(1, 3)):
            candidate_id = rng.randint(1, num_candidates)
            registry.vote(voter, election_id, candidate_id, rng.randint(1, max_weight))

    registry.close_election(OWNER, election_id)
    return registry, election_id


def main():
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n")[0])
    parser.add_argument("--name", default="Board Election", help="Election name")
    parser.add_argument("--candidates", type=int, default=4, help="Number of candidates")
    parser.add_argument("--voters", type=int, default=50, help="Number of voters")
    parser.add_argument("--max-weight", type=int, default=5,
                        help="Largest weight a single ballot may carry")
    parser.add_argument("--seed", type=int, default=SEED, help="Random seed")
    parser.add_argument("--events", action="store_true",
                        help="Also print the event log")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log election activity to stderr")
    args = parser.parse_args()

    if args.candidates < 1:
        parser.error("--candidates must be at least 1")
    if args.max_weight < 1:
        parser.error("--max-weight must be at least 1")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    registry, election_id = simulate(
        args.name, args.candidates, args.voters, args.max_weight, args.seed
    )

    output = registry.tally.get_summary(election_id)
    if args.events:
        output["events"] = [e.to_dict() for e in registry.events.for_election(election_id)]
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
