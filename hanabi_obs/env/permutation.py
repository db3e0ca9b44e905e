"""Color and seat relabelling of observation snapshots.

Training with shuffled colors (and, for some setups, shuffled seats) feeds
the encoders a relabelled copy of the snapshot, so every section sees the
same consistent game under new names.

  color_permute[c]  the encoded color of true color c
  order[p]          the encoded position of observer-relative player p;
                    the observer stays first, so order[0] must be 0
"""

from dataclasses import replace
from typing import Optional, Sequence

from hanabi_obs.config.game_config import GameConfig
from hanabi_obs.env.move_types import is_reveal
from hanabi_obs.env.observation import Card, CardKnowledge, Hand, HistoryItem, Observation


def check_permutation(values: Sequence[int], size: int, name: str) -> list[int]:
    values = [int(v) for v in values]
    if sorted(values) != list(range(size)):
        raise ValueError(f"{name} must be a permutation of 0..{size - 1}, got {values}")
    return values


def invert_permutation(permute: Sequence[int]) -> list[int]:
    inverse = [0] * len(permute)
    for i, p in enumerate(permute):
        inverse[p] = i
    return inverse


def check_color_permute(config: GameConfig, color_permute: Sequence[int]) -> list[int]:
    """Validate ``color_permute``; colors may only swap if their card counts agree."""
    color_permute = check_permutation(color_permute, config.num_colors, "color_permute")
    for color, target in enumerate(color_permute):
        if config.card_instances[color] != config.card_instances[target]:
            raise ValueError(
                f"colors {color} and {target} have different card counts and cannot be swapped"
            )
    return color_permute


def check_order(config: GameConfig, order: Sequence[int]) -> list[int]:
    order = check_permutation(order, config.num_players, "order")
    if order[0] != 0:
        raise ValueError("order must keep the observer at position 0")
    return order


def _permute_card(card: Card, color_permute: list[int]) -> Card:
    if not card.is_valid():
        return card
    return Card(color_permute[card.color], card.rank)


def _permute_knowledge(
    knowledge: CardKnowledge, color_permute: list[int], inv_color_permute: list[int]
) -> CardKnowledge:
    other = knowledge.copy()
    other.color_plausible = [knowledge.color_plausible[c] for c in inv_color_permute]
    if knowledge.color is not None:
        other.color = color_permute[knowledge.color]
    return other


def _permute_history_item(
    item: HistoryItem, num_players: int, color_permute: list[int], order: list[int]
) -> HistoryItem:
    def seat(player: int) -> int:
        return order[player] if player >= 0 else player

    def color(value: int) -> int:
        return color_permute[value] if value >= 0 else value

    move = item.move
    target_offset = move.target_offset
    if is_reveal(move.move_type) and item.player >= 0:
        target = (item.player + target_offset) % num_players
        target_offset = (order[target] - order[item.player]) % num_players

    return replace(
        item,
        move=replace(move, target_offset=target_offset, color=color(move.color)),
        player=seat(item.player),
        color=color(item.color),
        deal_to_player=seat(item.deal_to_player),
    )


def permute_observation(
    config: GameConfig,
    obs: Observation,
    color_permute: Optional[Sequence[int]] = None,
    order: Optional[Sequence[int]] = None,
) -> Observation:
    """Return a relabelled copy of ``obs``; the input is left untouched.

    Args:
        config: game the snapshot belongs to
        obs: observer-relative snapshot
        color_permute: color relabelling, identity if None
        order: seat relabelling, identity if None
    """
    if color_permute is None and order is None:
        return obs

    num_players = config.num_players
    if len(obs.hands) != num_players:
        raise ValueError(f"expected {num_players} hands, got {len(obs.hands)}")

    color_permute = (
        list(range(config.num_colors)) if color_permute is None
        else check_color_permute(config, color_permute)
    )
    order = list(range(num_players)) if order is None else check_order(config, order)
    inv_color_permute = invert_permutation(color_permute)

    hands: list[Optional[Hand]] = [None] * num_players
    for player, hand in enumerate(obs.hands):
        hands[order[player]] = Hand(
            [_permute_card(card, color_permute) for card in hand.cards],
            [_permute_knowledge(k, color_permute, inv_color_permute) for k in hand.knowledge],
        )

    fireworks = list(obs.fireworks)
    if len(fireworks) == config.num_colors:
        fireworks = [obs.fireworks[c] for c in inv_color_permute]

    return replace(
        obs,
        hands=hands,
        discard_pile=[_permute_card(card, color_permute) for card in obs.discard_pile],
        fireworks=fireworks,
        last_moves=[
            _permute_history_item(item, num_players, color_permute, order)
            for item in obs.last_moves
        ],
    )
