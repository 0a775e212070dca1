"""Error taxonomy for the voting and commitment core.

Every hard failure is an ``HTTPException`` raised from the service layer with
``detail = {"code": ..., "message": ..., **payload}``. Ties and soft-block
duplicate warnings are not errors; see ``commit_service.CommitOutcome``.
"""
import functools
import logging
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError

logger = logging.getLogger(__name__)


class VotingError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "voting_error"

    def __init__(self, message: str, **payload: Any):
        self.message = message
        self.payload = payload
        super().__init__(
            status_code=self.status_code,
            detail={"code": self.code, "message": message, **payload},
        )


class Forbidden(VotingError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class NotFound(VotingError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class VotingClosed(VotingError):
    status_code = status.HTTP_409_CONFLICT
    code = "voting_closed"


class AlreadyCommitted(VotingError):
    status_code = status.HTTP_409_CONFLICT
    code = "already_committed"


class NotCommitted(VotingError):
    status_code = status.HTTP_409_CONFLICT
    code = "not_committed"


class NoVotes(VotingError):
    status_code = status.HTTP_409_CONFLICT
    code = "no_votes"


class DuplicateForbidden(VotingError):
    status_code = status.HTTP_409_CONFLICT
    code = "duplicate_forbidden"


class BothMustBeCommitted(VotingError):
    status_code = status.HTTP_409_CONFLICT
    code = "both_must_be_committed"


class SwapFailed(VotingError):
    """Swap aborted; both original assignments were restored."""

    status_code = status.HTTP_409_CONFLICT
    code = "swap_failed"


class SwapCorrupted(VotingError):
    """Swap aborted and the original assignments could not be restored."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "swap_corrupted"


class StorageUnavailable(VotingError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    code = "storage_unavailable"


class ProposalExists(VotingError):
    status_code = status.HTTP_409_CONFLICT
    code = "proposal_exists"


class PolicyLocked(VotingError):
    status_code = status.HTTP_409_CONFLICT
    code = "policy_locked"


class InvalidTieBreak(VotingError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "invalid_tie_break"


class InvalidVotingWindow(VotingError):
    code = "invalid_voting_window"


class InvalidSwap(VotingError):
    code = "invalid_swap"


STORAGE_ERRORS = (OperationalError, PoolTimeoutError)


def storage_bound(func):
    """Map storage timeouts and dropped connections to ``StorageUnavailable``.

    Expects the SQLAlchemy session as the first positional argument so it can
    be rolled back before the error is surfaced.
    """

    @functools.wraps(func)
    def wrapper(db, *args, **kwargs):
        try:
            return func(db, *args, **kwargs)
        except STORAGE_ERRORS as exc:
            db.rollback()
            logger.warning("Storage unavailable during %s: %s", func.__name__, exc)
            raise StorageUnavailable("Storage is temporarily unavailable, retry later") from exc

    return wrapper
