"""Count of card copies not yet discarded or played onto the fireworks."""

import logging

import numpy as np

from hanabi_obs.config.game_config import GameConfig
from hanabi_obs.env.observation import Observation
from hanabi_obs.errors import CardCountError
from hanabi_obs.model.card_encoder import card_index

logger = logging.getLogger(__name__)


def full_deck_count(config: GameConfig) -> np.ndarray:
    """Instance count per identity, color-major."""
    return np.array(
        [
            config.number_card_instances(color, rank)
            for color in range(config.num_colors)
            for rank in range(config.num_ranks)
        ],
        dtype=np.int64,
    )


def compute_card_count(config: GameConfig, obs: Observation) -> np.ndarray:
    """Remaining copies per identity: still in the deck or in some hand.

    Raises CardCountError when the total does not match
    ``deck_size + sum(hand sizes)``.
    """
    num_ranks = config.num_ranks
    card_count = full_deck_count(config)

    for card in obs.discard_pile:
        card_count[card_index(card.color, card.rank, num_ranks)] -= 1

    # fireworks[c] cards of color c are on the board: ranks 0..fireworks[c]-1
    for color, firework in enumerate(obs.fireworks):
        if firework > 0:
            start = card_index(color, 0, num_ranks)
            card_count[start:start + firework] -= 1

    total = int(card_count.sum())
    hand_cards = obs.num_hand_cards
    if total != obs.deck_size + hand_cards:
        logger.error(
            "card count mismatch: remaining=%d deck=%d hands=%d",
            total, obs.deck_size, hand_cards,
        )
        raise CardCountError(total, obs.deck_size, hand_cards)
    return card_count
