"""Last-action section: the most recent move that was not a deal.

Field order, always reserved whatever the move kind:
  acting player    num_players one-hot
  move kind        4 one-hot (play, discard, reveal color, reveal rank)
  target player    num_players one-hot            reveal only
  color            num_colors one-hot             reveal color only
  rank             num_ranks one-hot              reveal rank only
  reveal outcome   hand_size bits                 reveal only
  position         hand_size one-hot              play/discard only
  card             colors*ranks one-hot           play/discard only
  scored, info     2 flags                        play only
"""

import numpy as np

from hanabi_obs.config.game_config import GameConfig
from hanabi_obs.env.move_types import (
    ENCODED_MOVE_TYPES,
    NUM_ENCODED_MOVE_TYPES,
    MoveType,
    is_play_or_discard,
    is_reveal,
)
from hanabi_obs.env.observation import Observation
from hanabi_obs.model.card_encoder import card_index, write_bitmask, write_one_hot
from hanabi_obs.model.layout import last_action_section_length


def encode_last_action(config: GameConfig, obs: Observation, section: np.ndarray) -> int:
    num_players = config.num_players
    hand_size = config.hand_size

    last_move = obs.last_non_deal_move()
    if last_move is None:
        return last_action_section_length(config)

    move = last_move.move
    move_type = move.move_type
    if move_type not in ENCODED_MOVE_TYPES:
        raise ValueError(f"cannot encode move kind {move_type!r} as last action")

    offset = 0
    # At a terminal state the last actor may be the observer, so no check here.
    offset += write_one_hot(section, offset, num_players, last_move.player)
    offset += write_one_hot(
        section, offset, NUM_ENCODED_MOVE_TYPES, ENCODED_MOVE_TYPES.index(move_type)
    )

    if is_reveal(move_type):
        target = (last_move.player + move.target_offset) % num_players
        write_one_hot(section, offset, num_players, target)
    offset += num_players

    if move_type == MoveType.REVEAL_COLOR:
        write_one_hot(section, offset, config.num_colors, move.color)
    offset += config.num_colors

    if move_type == MoveType.REVEAL_RANK:
        write_one_hot(section, offset, config.num_ranks, move.rank)
    offset += config.num_ranks

    if is_reveal(move_type):
        write_bitmask(section, offset, hand_size, last_move.reveal_bitmask)
    offset += hand_size

    if is_play_or_discard(move_type):
        write_one_hot(section, offset, hand_size, move.card_index)
    offset += hand_size

    if is_play_or_discard(move_type):
        write_one_hot(
            section,
            offset,
            config.bits_per_card,
            card_index(last_move.color, last_move.rank, config.num_ranks),
        )
    offset += config.bits_per_card

    if move_type == MoveType.PLAY:
        if last_move.scored:
            section[offset] = 1.0
        if last_move.information_token:
            section[offset + 1] = 1.0
    offset += 2

    return offset
