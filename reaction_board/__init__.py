from .board import Leaderboard
from .codes import CodeAllocator
from .errors import (
    AllocationExhausted,
    CodeAlreadyUsed,
    InvalidReactionTime,
    LeaderboardError,
    StorageIOError,
)
from .ranking import rank_entries
from .serializer import MutationSerializer
from .settings import BoardSettings
from .storage import EntryStore, ReservedCodeRegistry
from .submission import SubmissionWorkflow
from .types import Entry, SubmitResult
from .validation import InputSanitizer, SubmitRequest, is_valid_code

__all__ = [
    "AllocationExhausted",
    "BoardSettings",
    "CodeAllocator",
    "CodeAlreadyUsed",
    "Entry",
    "EntryStore",
    "InputSanitizer",
    "InvalidReactionTime",
    "Leaderboard",
    "LeaderboardError",
    "MutationSerializer",
    "ReservedCodeRegistry",
    "StorageIOError",
    "SubmissionWorkflow",
    "SubmitRequest",
    "SubmitResult",
    "is_valid_code",
    "rank_entries",
]
