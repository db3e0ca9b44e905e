"""Move kinds reported by the game engine."""

from enum import IntEnum


class MoveType(IntEnum):
    INVALID = 0
    PLAY = 1
    DISCARD = 2
    REVEAL_COLOR = 3
    REVEAL_RANK = 4
    DEAL = 5


MOVE_TYPE_NAMES = [
    "Invalid",
    "Play",
    "Discard",
    "RevealColor",
    "RevealRank",
    "Deal",
]

# Move kinds that get a slot in the last-action one-hot, in field order.
ENCODED_MOVE_TYPES = (
    MoveType.PLAY,
    MoveType.DISCARD,
    MoveType.REVEAL_COLOR,
    MoveType.REVEAL_RANK,
)
NUM_ENCODED_MOVE_TYPES = len(ENCODED_MOVE_TYPES)


def move_type_name(move_type: int) -> str:
    """Get human-readable move kind name."""
    if 0 <= move_type < len(MOVE_TYPE_NAMES):
        return MOVE_TYPE_NAMES[move_type]
    return f"Unknown({move_type})"


def is_reveal(move_type: int) -> bool:
    return move_type in (MoveType.REVEAL_COLOR, MoveType.REVEAL_RANK)


def is_play_or_discard(move_type: int) -> bool:
    return move_type in (MoveType.PLAY, MoveType.DISCARD)
