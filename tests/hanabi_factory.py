"""Builds consistent observations by playing out a tiny deterministic table.

Player indices passed to Table are absolute; ``observation(observer)`` turns
them observer-relative the way the engine does.
"""

from typing import Optional

from hanabi_obs.config.game_config import GameConfig
from hanabi_obs.env.move_types import MoveType
from hanabi_obs.env.observation import (
    Card,
    CardKnowledge,
    Hand,
    HistoryItem,
    Move,
    Observation,
)


def full_deck(config: GameConfig) -> list[Card]:
    """Every physical card, color-major."""
    return [
        Card(color, rank)
        for color in range(config.num_colors)
        for rank in range(config.num_ranks)
        for _ in range(config.number_card_instances(color, rank))
    ]


class Table:
    def __init__(self, config: GameConfig, deck: Optional[list[Card]] = None):
        self.config = config
        self.deck = list(deck) if deck is not None else full_deck(config)
        if sorted(self.deck) != sorted(full_deck(config)):
            raise ValueError("deck must hold every card of the configuration exactly once")
        self.hands = [Hand() for _ in range(config.num_players)]
        self.discard_pile: list[Card] = []
        self.fireworks = [0] * config.num_colors
        self.information_tokens = config.max_information_tokens
        self.life_tokens = config.max_life_tokens
        self.history: list[HistoryItem] = []  # most recent first
        for player in range(config.num_players):
            for _ in range(config.hand_size):
                self._deal(player)

    def _deal(self, player: int):
        if not self.deck:
            return
        card = self.deck.pop(0)
        self.hands[player].add_card(card, CardKnowledge(self.config.num_colors, self.config.num_ranks))
        self.history.insert(
            0,
            HistoryItem(move=Move(MoveType.DEAL, color=card.color, rank=card.rank),
                        deal_to_player=player),
        )

    def play(self, player: int, card_index: int):
        card = self.hands[player].remove_from_hand(card_index)
        scored = card.rank == self.fireworks[card.color]
        information_token = False
        if scored:
            self.fireworks[card.color] += 1
            if card.rank == self.config.num_ranks - 1 and \
                    self.information_tokens < self.config.max_information_tokens:
                self.information_tokens += 1
                information_token = True
        else:
            self.discard_pile.append(card)
            self.life_tokens -= 1
        self.history.insert(
            0,
            HistoryItem(
                move=Move(MoveType.PLAY, card_index=card_index),
                player=player,
                scored=scored,
                information_token=information_token,
                color=card.color,
                rank=card.rank,
            ),
        )
        self._deal(player)

    def discard(self, player: int, card_index: int):
        card = self.hands[player].remove_from_hand(card_index)
        self.discard_pile.append(card)
        information_token = self.information_tokens < self.config.max_information_tokens
        if information_token:
            self.information_tokens += 1
        self.history.insert(
            0,
            HistoryItem(
                move=Move(MoveType.DISCARD, card_index=card_index),
                player=player,
                information_token=information_token,
                color=card.color,
                rank=card.rank,
            ),
        )
        self._deal(player)

    def reveal_color(self, player: int, target_offset: int, color: int):
        self._reveal(player, target_offset, MoveType.REVEAL_COLOR, color=color)

    def reveal_rank(self, player: int, target_offset: int, rank: int):
        self._reveal(player, target_offset, MoveType.REVEAL_RANK, rank=rank)

    def _reveal(self, player: int, target_offset: int, move_type: MoveType, color: int = -1, rank: int = -1):
        target = (player + target_offset) % self.config.num_players
        hand = self.hands[target]
        bitmask = 0
        for i, (card, knowledge) in enumerate(zip(hand.cards, hand.knowledge)):
            if move_type == MoveType.REVEAL_COLOR:
                if card.color == color:
                    bitmask |= 1 << i
                    knowledge.apply_is_color_hint(color)
                else:
                    knowledge.apply_is_not_color_hint(color)
            else:
                if card.rank == rank:
                    bitmask |= 1 << i
                    knowledge.apply_is_rank_hint(rank)
                else:
                    knowledge.apply_is_not_rank_hint(rank)
        if bitmask == 0:
            raise ValueError("a hint must touch at least one card")
        self.information_tokens -= 1
        self.history.insert(
            0,
            HistoryItem(
                move=Move(move_type, target_offset=target_offset, color=color, rank=rank),
                player=player,
                reveal_bitmask=bitmask,
                newly_revealed_bitmask=bitmask,
            ),
        )

    def observation(self, observer: int = 0, show_own_cards: bool = False) -> Observation:
        num_players = self.config.num_players

        def relative(player: int) -> int:
            return (player - observer) % num_players if player >= 0 else player

        hands = []
        for offset in range(num_players):
            hand = self.hands[(observer + offset) % num_players]
            cards = list(hand.cards)
            if offset == 0 and not show_own_cards:
                cards = [Card.invalid() for _ in cards]
            hands.append(Hand(cards, [k.copy() for k in hand.knowledge]))

        last_moves = [
            HistoryItem(
                move=item.move,
                player=relative(item.player),
                scored=item.scored,
                information_token=item.information_token,
                color=item.color,
                rank=item.rank,
                reveal_bitmask=item.reveal_bitmask,
                newly_revealed_bitmask=item.newly_revealed_bitmask,
                deal_to_player=relative(item.deal_to_player),
            )
            for item in self.history
        ]
        return Observation(
            hands=hands,
            discard_pile=list(self.discard_pile),
            fireworks=list(self.fireworks),
            deck_size=len(self.deck),
            information_tokens=self.information_tokens,
            life_tokens=self.life_tokens,
            last_moves=last_moves,
            observing_player=observer,
            current_player=0,
        )


def deck_with_hands(config: GameConfig, hands: list[list[tuple[int, int]]]) -> list[Card]:
    """A deck that deals ``hands`` (in player order) before the remaining cards."""
    rest = full_deck(config)
    front = []
    for hand in hands:
        for color, rank in hand:
            card = Card(color, rank)
            rest.remove(card)
            front.append(card)
    return front + rest


def toy_config(**kwargs) -> GameConfig:
    """2 colors, 2 ranks, 2 players with 2 cards each: 8 cards, 4 in the deck."""
    params = dict(num_colors=2, num_ranks=2, num_players=2, hand_size=2,
                  max_information_tokens=3, max_life_tokens=1)
    params.update(kwargs)
    return GameConfig(**params)
