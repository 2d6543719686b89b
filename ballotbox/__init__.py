"""Multi-election management with weighted vote tallies."""

from .errors import ElectionError, InvalidState, NotFound, PermissionDenied
from .events import (
    CandidateAdded,
    ElectionClosed,
    ElectionCreated,
    ElectionStarted,
    Event,
    EventLog,
    VoteCast,
)
from .models import Candidate, ElectionInfo, Phase, Standing
from .registry import ElectionRegistry
from .tally import TallyQuery

__all__ = [
    "Candidate",
    "CandidateAdded",
    "ElectionClosed",
    "ElectionCreated",
    "ElectionError",
    "ElectionInfo",
    "ElectionRegistry",
    "ElectionStarted",
    "Event",
    "EventLog",
    "InvalidState",
    "NotFound",
    "PermissionDenied",
    "Phase",
    "Standing",
    "TallyQuery",
    "VoteCast",
]
