"""Section lengths of the canonical observation vector.

Layout of the flat observation, in order:
  hands          players * hand_size * colors*ranks one-hot + players "missing card" bits
  board          deck thermometer + fireworks one-hot + info/life token thermometers
  discards       one thermometer per identity, sized by its instance count
  last action    fixed-width move description (see last_action.py)
  card knowledge players * hand_size * (colors*ranks + colors + ranks);
                 omitted for ObservationType.MINIMAL

Every length depends on the GameConfig only, never on runtime state.
"""

from typing import NamedTuple

from hanabi_obs.config.game_config import GameConfig
from hanabi_obs.env.move_types import NUM_ENCODED_MOVE_TYPES

# Own-hand status is a fixed 5 slots x {playable, obsolete, not yet playable}
OWN_HAND_SLOTS = 5
OWN_HAND_STATUS_BITS = 3
OWN_HAND_SIZE = OWN_HAND_SLOTS * OWN_HAND_STATUS_BITS


class SectionLayout(NamedTuple):
    name: str
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


def hands_section_length(config: GameConfig) -> int:
    return config.num_players * config.hand_size * config.bits_per_card + config.num_players


def board_section_length(config: GameConfig) -> int:
    return (
        config.max_deck_size - config.num_players * config.hand_size  # deck
        + config.num_colors * config.num_ranks                         # fireworks
        + config.max_information_tokens
        + config.max_life_tokens
    )


def discard_section_length(config: GameConfig) -> int:
    return config.max_deck_size


def last_action_section_length(config: GameConfig) -> int:
    return (
        config.num_players              # acting player
        + NUM_ENCODED_MOVE_TYPES        # play, discard, reveal color, reveal rank
        + config.num_players            # target player (reveal)
        + config.num_colors             # color (reveal color)
        + config.num_ranks              # rank (reveal rank)
        + config.hand_size              # reveal outcome bitmask
        + config.hand_size              # position (play/discard)
        + config.bits_per_card          # card (play/discard)
        + 2                             # scored, added information token (play)
    )


def card_knowledge_slot_length(config: GameConfig) -> int:
    return config.bits_per_card + config.num_colors + config.num_ranks


def card_knowledge_section_length(config: GameConfig) -> int:
    return config.num_players * config.hand_size * card_knowledge_slot_length(config)


def belief_length(config: GameConfig) -> int:
    """Length of a belief/hand-mask vector (knowledge minus hint sub-fields)."""
    return config.num_players * config.hand_size * config.bits_per_card


def describe_layout(config: GameConfig) -> list[SectionLayout]:
    """Ordered section descriptors of the full observation."""
    lengths = [
        ("hands", hands_section_length(config)),
        ("board", board_section_length(config)),
        ("discards", discard_section_length(config)),
        ("last_action", last_action_section_length(config)),
    ]
    if not config.is_minimal:
        lengths.append(("card_knowledge", card_knowledge_section_length(config)))

    sections = []
    start = 0
    for name, length in lengths:
        sections.append(SectionLayout(name, start, start + length))
        start += length
    return sections
