"""Common card-knowledge section.

For each slot of each hand, observer included:
  colors*ranks bits   every identity still plausible given the hints
  num_colors bits     the color a hint named directly, if any
  num_ranks bits      the rank a hint named directly, if any

Knowing nothing about a card and then being told it is green gives, for
colors RYGWB and five ranks:

  00000 00000 11111 00000 00000   only green cards are possible
  0 0 1 0 0                       color was revealed as green
  00000                           rank was not revealed

Being told a *different* card is green flips it: every non-green identity
stays plausible and neither hint field is set.
"""

import numpy as np

from hanabi_obs.config.game_config import GameConfig
from hanabi_obs.env.observation import Observation
from hanabi_obs.model.card_encoder import card_index, write_one_hot
from hanabi_obs.model.layout import card_knowledge_slot_length
from hanabi_obs.model.public_encoder import check_hand_shapes


def encode_card_knowledge(config: GameConfig, obs: Observation, section: np.ndarray) -> int:
    num_colors = config.num_colors
    num_ranks = config.num_ranks
    hand_size = config.hand_size
    slot_length = card_knowledge_slot_length(config)
    check_hand_shapes(config, obs)

    offset = 0
    for hand in obs.hands:
        for knowledge in hand.knowledge:
            for color in range(num_colors):
                if not knowledge.is_color_plausible(color):
                    continue
                for rank in range(num_ranks):
                    if knowledge.is_rank_plausible(rank):
                        section[offset + card_index(color, rank, num_ranks)] = 1.0
            offset += config.bits_per_card

            if knowledge.color_hinted:
                write_one_hot(section, offset, num_colors, knowledge.color)
            offset += num_colors
            if knowledge.rank_hinted:
                write_one_hot(section, offset, num_ranks, knowledge.rank)
            offset += num_ranks

        offset += (hand_size - len(hand.knowledge)) * slot_length

    return offset


def plausibility_mask(config: GameConfig, knowledge_section: np.ndarray) -> np.ndarray:
    """View a knowledge section as a (players, hand_size, colors*ranks) 0/1 mask."""
    slots = knowledge_section.reshape(
        config.num_players, config.hand_size, card_knowledge_slot_length(config)
    )
    return slots[:, :, :config.bits_per_card]
