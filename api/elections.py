"""Serverless function exposing election operations as JSON calls."""

import json
import logging
import os
import sys
from pathlib import Path

# Add the project root to the path so we can import ballotbox
sys.path.insert(0, str(Path(__file__).parent.parent))

from ballotbox import ElectionRegistry
from ballotbox.errors import ElectionError, InvalidState, NotFound, PermissionDenied

logger = logging.getLogger(__name__)

OWNER = os.getenv("BALLOTBOX_OWNER", "admin")
CALLER_HEADER = os.getenv("BALLOTBOX_CALLER_HEADER", "x-caller-identity")

registry = ElectionRegistry(owner=OWNER)

# operation name -> (method on the registry or its tally, argument names, caller required)
OPERATIONS = {
    "createElection": ("create_election", ("name",), True),
    "addCandidate": ("add_candidate", ("electionId", "name"), True),
    "startElection": ("start_election", ("electionId",), True),
    "closeElection": ("close_election", ("electionId",), True),
    "vote": ("vote", ("electionId", "candidateId", "numVotes"), True),
    "getElection": ("get_election", ("electionId",), False),
    "getCandidateVotes": ("tally.get_candidate_votes", ("electionId", "candidateId"), False),
    "getCandidateVotePercentage": (
        "tally.get_candidate_vote_percentage", ("electionId", "candidateId"), False,
    ),
    "getTotalVotes": ("tally.get_total_votes", ("electionId",), False),
    "getVoterTotalVotes": ("tally.get_voter_total_votes", ("electionId", "voter"), False),
    "getVoterCandidateVotes": (
        "tally.get_voter_candidate_votes", ("electionId", "voter", "candidateId"), False,
    ),
    "getVoterCandidateVotePercentage": (
        "tally.get_voter_candidate_vote_percentage", ("electionId", "voter", "candidateId"), False,
    ),
    "getCandidates": ("tally.get_candidates", ("electionId",), False),
    "getCandidateName": ("tally.get_candidate_name", ("electionId", "candidateId"), False),
    "getStandings": ("tally.get_standings", ("electionId",), False),
    "getSummary": ("tally.get_summary", ("electionId",), False),
}

INTEGER_ARGS = {"electionId", "candidateId", "numVotes"}
STRING_ARGS = {"name", "voter"}

RESPONSE_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
}

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": f"Content-Type, {CALLER_HEADER}",
}

ERROR_STATUS = {
    PermissionDenied: 403,
    NotFound: 404,
    InvalidState: 409,
}


class RequestError(Exception):
    """Malformed operation request."""
    pass


def handler(request):
    """Handle an election operation request.

    Accepts:
    - POST with JSON body: {"operation": "<name>", "args": {...}}

    The caller identity is read from the CALLER_HEADER request header. The
    surrounding runtime is responsible for authenticating it.

    Returns JSON with the operation result under "result".
    """
    if request.method == "OPTIONS":
        return create_response("", status=204, headers=PREFLIGHT_HEADERS)

    if request.method != "POST":
        return create_response(
            {"error": "Method not allowed. Use POST."},
            status=405,
        )

    try:
        body = request.body.decode("utf-8")
        data = json.loads(body)
        if not isinstance(data, dict):
            raise RequestError("Request body must be a JSON object")

        caller = request.headers.get(CALLER_HEADER)
        result = dispatch(caller, data.get("operation"), data.get("args") or {})

        return create_response({"result": to_json(result)})

    except ElectionError as e:
        return create_response(
            {"error": str(e), "kind": type(e).__name__},
            status=ERROR_STATUS.get(type(e), 400),
        )
    except json.JSONDecodeError as e:
        return create_response(
            {"error": f"Invalid JSON: {e}"},
            status=400,
        )
    except (RequestError, ValueError) as e:
        return create_response(
            {"error": str(e)},
            status=400,
        )
    except Exception as e:
        logger.exception("Unhandled error in election handler")
        return create_response(
            {"error": f"Internal error: {e}"},
            status=500,
        )


def dispatch(caller, operation: str | None, args: dict):
    """Run a named operation with arguments taken from args."""
    if operation not in OPERATIONS:
        raise RequestError(f"Unknown operation: {operation!r}")
    if not isinstance(args, dict):
        raise RequestError("'args' must be a JSON object")

    method, arg_names, needs_caller = OPERATIONS[operation]
    func = registry
    for attr in method.split("."):
        func = getattr(func, attr)

    values = []
    for arg_name in arg_names:
        if arg_name not in args:
            raise RequestError(f"Missing '{arg_name}' for {operation}")
        value = args[arg_name]
        if arg_name in INTEGER_ARGS and (isinstance(value, bool) or not isinstance(value, int)):
            raise RequestError(f"'{arg_name}' must be an integer")
        if arg_name in STRING_ARGS and not isinstance(value, str):
            raise RequestError(f"'{arg_name}' must be a string")
        values.append(value)

    if needs_caller:
        if not caller:
            raise RequestError(f"Missing {CALLER_HEADER} header")
        return func(caller, *values)
    return func(*values)


def to_json(result):
    """Convert operation results into JSON-serializable values."""
    if isinstance(result, list):
        return [to_json(item) for item in result]
    if hasattr(result, "to_dict"):
        return result.to_dict()
    return result


def create_response(body, status: int = 200, headers: dict | None = None):
    """Wrap an operation result or error as a serverless response dict."""
    return {
        "statusCode": status,
        "headers": {**RESPONSE_HEADERS, **(headers or {})},
        "body": json.dumps(body) if isinstance(body, dict) else body,
    }
