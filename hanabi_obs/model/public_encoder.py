"""Hands, board and discard sections of the observation.

Each encoder writes into a zero-filled section view sized by the layout
planner and returns the number of slots it consumed.
"""

import numpy as np

from hanabi_obs.config.game_config import GameConfig
from hanabi_obs.env.observation import Observation
from hanabi_obs.model.card_encoder import card_index, write_one_hot, write_thermometer


def check_hand_shapes(config: GameConfig, obs: Observation):
    """Reject snapshots with the wrong number of hands or an overlong hand."""
    if len(obs.hands) != config.num_players:
        raise ValueError(f"expected {config.num_players} hands, got {len(obs.hands)}")
    for player, hand in enumerate(obs.hands):
        if len(hand) > config.hand_size:
            raise ValueError(f"player {player} holds {len(hand)} cards, hand size is {config.hand_size}")


def encode_hands(
    config: GameConfig,
    obs: Observation,
    section: np.ndarray,
    show_own_cards: bool,
) -> int:
    """Encode every hand plus one "missing a card" bit per player.

    Each card is a one-hot over colors*ranks. The observer's own cards (hand 0)
    stay all-zero unless ``show_own_cards`` is set; a concealed card must be
    invalid. Absent trailing cards leave their block empty.
    """
    bits_per_card = config.bits_per_card
    num_ranks = config.num_ranks
    hand_size = config.hand_size
    check_hand_shapes(config, obs)

    offset = 0
    for player, hand in enumerate(obs.hands):
        for card in hand.cards:
            if player == 0 and not show_own_cards:
                if card.is_valid():
                    raise ValueError("own card must be hidden when show_own_cards is False")
            else:
                if not card.is_valid():
                    raise ValueError(f"player {player} has a hidden card that should be visible")
                write_one_hot(section, offset, bits_per_card, card_index(card.color, card.rank, num_ranks))
            offset += bits_per_card
        offset += (hand_size - len(hand)) * bits_per_card

    for player, hand in enumerate(obs.hands):
        if len(hand) < hand_size:
            section[offset + player] = 1.0
    offset += config.num_players
    return offset


def encode_board(config: GameConfig, obs: Observation, section: np.ndarray) -> int:
    """Encode deck size, fireworks and token counts.

    Deck size and tokens are thermometers, e.g. 2 of 3 life tokens is 110.
    Fireworks are one-hot on the highest played rank, all-zero if none.
    """
    num_ranks = config.num_ranks
    offset = 0

    offset += write_thermometer(
        section, offset, config.max_deck_size - config.num_players * config.hand_size, obs.deck_size
    )

    if len(obs.fireworks) != config.num_colors:
        raise ValueError(f"expected {config.num_colors} fireworks, got {len(obs.fireworks)}")
    for firework in obs.fireworks:
        if firework > 0:
            write_one_hot(section, offset, num_ranks, firework - 1)
        offset += num_ranks

    offset += write_thermometer(section, offset, config.max_information_tokens, obs.information_tokens)
    offset += write_thermometer(section, offset, config.max_life_tokens, obs.life_tokens)
    return offset


def encode_discards(config: GameConfig, obs: Observation, section: np.ndarray) -> int:
    """Encode the discard pile as per-identity thermometers.

    Color-major; each identity gets as many slots as it has copies. With the
    standard 3/2/2/2/1 distribution a color reading ``110 00 11 10 1`` means
    two lowest-rank copies, both third-rank copies, one of the two fourth-rank
    copies and the single top-rank card are gone.
    """
    num_ranks = config.num_ranks
    discard_counts = np.zeros(config.bits_per_card, dtype=np.int64)
    for card in obs.discard_pile:
        discard_counts[card_index(card.color, card.rank, num_ranks)] += 1

    offset = 0
    for color in range(config.num_colors):
        for rank in range(num_ranks):
            offset += write_thermometer(
                section,
                offset,
                config.number_card_instances(color, rank),
                int(discard_counts[card_index(color, rank, num_ranks)]),
            )
    return offset
