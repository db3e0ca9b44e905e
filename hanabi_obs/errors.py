"""Fatal encoder errors.

All of these indicate either a layout bug or a snapshot that no consistent
game engine could have produced. They are never retried or recovered.
"""


class EncodingError(RuntimeError):
    """Base class for failed-precondition errors raised while encoding."""


class LayoutMismatchError(EncodingError):
    """A section encoder wrote a different number of slots than planned."""

    def __init__(self, section: str, expected: int, written: int):
        self.section = section
        self.expected = expected
        self.written = written
        super().__init__(
            f"{section} section wrote {written} slots, layout planned {expected}"
        )


class CardCountError(EncodingError):
    """Remaining card count disagrees with deck size plus visible hands."""

    def __init__(self, remaining: int, deck_size: int, hand_cards: int):
        self.remaining = remaining
        self.deck_size = deck_size
        self.hand_cards = hand_cards
        super().__init__(
            f"size mismatch: {remaining} unseen cards vs "
            f"deck {deck_size} + hands {hand_cards} = {deck_size + hand_cards}"
        )


class DegenerateBeliefError(EncodingError):
    """A hand slot's belief mass summed to zero."""

    def __init__(self, player: int, slot: int, total: float, stage: str = "v0"):
        self.player = player
        self.slot = slot
        self.total = total
        super().__init__(
            f"{stage} belief for player {player} slot {slot} has total {total}"
        )
