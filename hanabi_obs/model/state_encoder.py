"""Canonical observation encoder.

Composes the section encoders into one flat float32 vector. Sections are
written into pre-sized views of the output buffer and every section must
report exactly the length the layout planner predicts; anything else is a
LayoutMismatchError. The encoder holds only the GameConfig, so one instance
can encode observations from many threads.
"""

import logging
from typing import Callable, Optional, Sequence

import numpy as np

from hanabi_obs.config.game_config import GameConfig
from hanabi_obs.env.observation import Observation
from hanabi_obs.env.permutation import permute_observation
from hanabi_obs.errors import LayoutMismatchError
from hanabi_obs.model import layout
from hanabi_obs.model.belief import encode_v0_belief, v1_belief_section
from hanabi_obs.model.card_count import compute_card_count
from hanabi_obs.model.card_encoder import card_index, write_one_hot
from hanabi_obs.model.card_knowledge import encode_card_knowledge
from hanabi_obs.model.last_action import encode_last_action
from hanabi_obs.model.public_encoder import (
    check_hand_shapes,
    encode_board,
    encode_discards,
    encode_hands,
)

logger = logging.getLogger(__name__)

SectionEncoder = Callable[[np.ndarray], int]

# Own-hand status categories, in slot order
PLAYABLE = 0
OBSOLETE = 1
NOT_YET_PLAYABLE = 2


def run_section(name: str, section: np.ndarray, encoder: SectionEncoder) -> int:
    """Run ``encoder`` on a section view and check the slot count it reports."""
    written = encoder(section)
    if written != len(section):
        logger.error("layout mismatch in %s: wrote %d, planned %d", name, written, len(section))
        raise LayoutMismatchError(name, len(section), written)
    return written


def extract_belief(config: GameConfig, encoding: np.ndarray) -> np.ndarray:
    """Keep only the colors*ranks identity block of every slot.

    Works on any card-knowledge-shaped buffer: raw knowledge, V0 or V1.
    """
    expected = layout.card_knowledge_section_length(config)
    if len(encoding) != expected:
        raise ValueError(f"expected a card-knowledge buffer of {expected}, got {len(encoding)}")
    slots = encoding.reshape(
        config.num_players * config.hand_size, layout.card_knowledge_slot_length(config)
    )
    return np.ascontiguousarray(slots[:, :config.bits_per_card]).reshape(-1)


def encode_own_hand_status(config: GameConfig, obs: Observation) -> np.ndarray:
    """Classify each of the observer's cards against the fireworks.

    One-hot over (playable, obsolete, not yet playable) for a fixed 5 slots;
    unused trailing slots are zero. The observer's cards must be visible.
    """
    encoding = np.zeros(layout.OWN_HAND_SIZE, dtype=np.float32)
    cards = obs.hands[0].cards
    if len(cards) > layout.OWN_HAND_SLOTS:
        raise ValueError(f"own-hand status holds {layout.OWN_HAND_SLOTS} cards, got {len(cards)}")

    offset = 0
    for card in cards:
        if not card.is_valid():
            raise ValueError("own-hand status needs the observer's cards revealed")
        if card.color >= config.num_colors or card.rank >= config.num_ranks:
            raise ValueError(f"card {card} outside the configured deck")
        firework = obs.fireworks[card.color]
        if card.rank == firework:
            encoding[offset + PLAYABLE] = 1.0
        elif card.rank < firework:
            encoding[offset + OBSOLETE] = 1.0
        else:
            encoding[offset + NOT_YET_PLAYABLE] = 1.0
        offset += layout.OWN_HAND_STATUS_BITS
    return encoding


def encode_all_hand(config: GameConfig, obs: Observation) -> np.ndarray:
    """One-hot identity of every card in every hand, observer included.

    players * hand_size * colors*ranks values with no missing-card bits;
    absent trailing slots stay zero. Every card must be visible.
    """
    check_hand_shapes(config, obs)
    bits_per_card = config.bits_per_card
    encoding = np.zeros(layout.belief_length(config), dtype=np.float32)

    offset = 0
    for player, hand in enumerate(obs.hands):
        for slot, card in enumerate(hand.cards):
            if not card.is_valid():
                raise ValueError(f"player {player} slot {slot} is hidden")
            write_one_hot(
                encoding, offset + slot * bits_per_card, bits_per_card,
                card_index(card.color, card.rank, config.num_ranks),
            )
        offset += config.hand_size * bits_per_card
    return encoding


class CanonicalObservationEncoder:
    """Encodes observations of one game configuration."""

    def __init__(self, config: GameConfig):
        self.config = config
        self.sections = layout.describe_layout(config)
        logger.debug(
            "observation layout: %s",
            ", ".join(f"{s.name}[{s.start}:{s.end}]" for s in self.sections),
        )

    def shape(self) -> list[int]:
        return [self.sections[-1].end]

    @property
    def size(self) -> int:
        return self.sections[-1].end

    def encode(
        self,
        obs: Observation,
        show_own_cards: bool = False,
        hide_action: bool = False,
        order: Optional[Sequence[int]] = None,
        color_permute: Optional[Sequence[int]] = None,
    ) -> np.ndarray:
        """Full observation vector.

        Args:
            obs: observer-relative snapshot
            show_own_cards: one-hot the observer's own cards instead of zeros
            hide_action: leave the last-action section zero
            order: seat relabelling, see permute_observation
            color_permute: color relabelling, see permute_observation
        """
        config = self.config
        obs = permute_observation(config, obs, color_permute, order)
        encoding = np.zeros(self.size, dtype=np.float32)

        encoders: dict[str, SectionEncoder] = {
            "hands": lambda s: encode_hands(config, obs, s, show_own_cards),
            "board": lambda s: encode_board(config, obs, s),
            "discards": lambda s: encode_discards(config, obs, s),
            "last_action": (
                (lambda s: len(s)) if hide_action
                else (lambda s: encode_last_action(config, obs, s))
            ),
            "card_knowledge": lambda s: encode_v0_belief(config, obs, s),
        }

        offset = 0
        for section in self.sections:
            offset += run_section(
                section.name, encoding[section.start:section.end], encoders[section.name]
            )

        if offset != len(encoding):
            raise LayoutMismatchError("observation", len(encoding), offset)
        return encoding

    def encode_last_action(
        self,
        obs: Observation,
        order: Optional[Sequence[int]] = None,
        color_permute: Optional[Sequence[int]] = None,
    ) -> np.ndarray:
        obs = permute_observation(self.config, obs, color_permute, order)
        encoding = np.zeros(layout.last_action_section_length(self.config), dtype=np.float32)
        run_section("last_action", encoding, lambda s: encode_last_action(self.config, obs, s))
        return encoding

    def encode_card_knowledge(self, obs: Observation) -> np.ndarray:
        encoding = np.zeros(layout.card_knowledge_section_length(self.config), dtype=np.float32)
        run_section("card_knowledge", encoding, lambda s: encode_card_knowledge(self.config, obs, s))
        return encoding

    def encode_v0_belief(self, obs: Observation) -> np.ndarray:
        encoding = np.zeros(layout.card_knowledge_section_length(self.config), dtype=np.float32)
        run_section("v0_belief", encoding, lambda s: encode_v0_belief(self.config, obs, s))
        return extract_belief(self.config, encoding)

    def encode_v1_belief(self, obs: Observation) -> np.ndarray:
        return extract_belief(self.config, v1_belief_section(self.config, obs))

    def encode_hand_mask(self, obs: Observation) -> np.ndarray:
        return extract_belief(self.config, self.encode_card_knowledge(obs))

    def encode_card_count(self, obs: Observation) -> np.ndarray:
        return compute_card_count(self.config, obs).astype(np.float32)

    def encode_own_hand(
        self, obs: Observation, color_permute: Optional[Sequence[int]] = None
    ) -> np.ndarray:
        obs = permute_observation(self.config, obs, color_permute)
        return encode_own_hand_status(self.config, obs)

    def encode_all_hand(
        self, obs: Observation, color_permute: Optional[Sequence[int]] = None
    ) -> np.ndarray:
        obs = permute_observation(self.config, obs, color_permute)
        return encode_all_hand(self.config, obs)
