"""Tests for the composed observation encoder and extraction utilities."""

import numpy as np
import pytest

from hanabi_obs.config.game_config import GameConfig, ObservationType
from hanabi_obs.env.observation import Card, CardKnowledge, Hand, Observation
from hanabi_obs.errors import LayoutMismatchError
from hanabi_obs.model import layout
from hanabi_obs.model.state_encoder import (
    CanonicalObservationEncoder,
    encode_own_hand_status,
    extract_belief,
    run_section,
)

from hanabi_factory import Table, deck_with_hands, toy_config


def _played_table(config):
    table = Table(config)
    table.reveal_rank(0, 1, 4)  # player 1 holds a 5 in the color-major deal
    table.play(1, 0)
    table.discard(0, 0)
    return table


@pytest.mark.parametrize("config", [
    GameConfig(),
    GameConfig(num_players=3),
    GameConfig(num_players=4, hand_size=4),
    GameConfig(observation_type=ObservationType.MINIMAL),
])
def test_encode_fills_exact_shape(config):
    """Test encode fills exactly the planned shape."""
    encoder = CanonicalObservationEncoder(config)
    table = Table(config)
    table.discard(0, 0)
    encoding = encoder.encode(table.observation())
    assert encoding.shape == tuple(encoder.shape())
    assert encoding.dtype == np.float32
    assert ((encoding >= 0) & (encoding <= 1)).all()


def test_sections_match_standalone_encoders():
    """Test sections match the standalone encoders."""
    config = GameConfig()
    table = Table(config)
    table.reveal_rank(0, 1, 2)
    table.discard(1, 4)
    obs = table.observation()
    encoder = CanonicalObservationEncoder(config)
    encoding = encoder.encode(obs)
    sections = {s.name: encoding[s.start:s.end] for s in encoder.sections}

    np.testing.assert_array_equal(sections["last_action"], encoder.encode_last_action(obs))
    knowledge = sections["card_knowledge"]
    np.testing.assert_allclose(extract_belief(config, knowledge), encoder.encode_v0_belief(obs))
    assert sections["hands"][:5 * 25].sum() == 0


def test_hide_action_keeps_slots_zero():
    """Test hide_action zeroes only the last action."""
    config = GameConfig()
    table = Table(config)
    table.reveal_rank(0, 1, 2)
    obs = table.observation()
    encoder = CanonicalObservationEncoder(config)
    shown = encoder.encode(obs)
    hidden = encoder.encode(obs, hide_action=True)
    last = next(s for s in encoder.sections if s.name == "last_action")

    assert shown.shape == hidden.shape
    assert shown[last.start:last.end].sum() > 0
    assert hidden[last.start:last.end].sum() == 0
    np.testing.assert_array_equal(
        np.delete(shown, np.arange(last.start, last.end)),
        np.delete(hidden, np.arange(last.start, last.end)),
    )


def test_show_own_cards_only_changes_own_block():
    """Test showing own cards only changes the own block."""
    config = GameConfig()
    table = Table(config)
    encoder = CanonicalObservationEncoder(config)
    hidden = encoder.encode(table.observation())
    shown = encoder.encode(table.observation(show_own_cards=True), show_own_cards=True)
    own = config.hand_size * config.bits_per_card
    assert shown[:own].sum() == 5
    np.testing.assert_array_equal(shown[own:], hidden[own:])


def test_own_hand_status_toy_game():
    """Test own-hand status on a small game."""
    config = toy_config()
    own = Hand([Card(0, 0), Card(1, 1)], [CardKnowledge(2, 2), CardKnowledge(2, 2)])
    other = Table(config).observation().hands[1]
    obs = Observation(hands=[own, other], fireworks=[1, 0])
    status = CanonicalObservationEncoder(config).encode_own_hand(obs)
    assert status.shape == (15,)
    assert status[0:3].tolist() == [0, 1, 0]   # obsolete
    assert status[3:6].tolist() == [0, 0, 1]   # not yet playable
    assert status[6:].sum() == 0


def test_own_hand_status_playable():
    """Test own-hand status after a play."""
    config = GameConfig()
    deck = deck_with_hands(config, [
        [(0, 0), (0, 1), (1, 0), (2, 3), (4, 0)],
        [(3, 0), (3, 1), (3, 2), (3, 3), (3, 4)],
    ])
    table = Table(config, deck)
    table.play(0, 0)  # R1: R2 becomes playable
    status = encode_own_hand_status(config, table.observation(show_own_cards=True)).reshape(5, 3)
    # hand is now R2 Y1 G4 B1 + the next card dealt (R1, obsolete)
    assert status.argmax(axis=1).tolist() == [0, 0, 2, 0, 1]
    assert status.sum() == 5


def test_own_hand_status_needs_visible_cards():
    """Test own-hand status rejects hidden cards."""
    config = GameConfig()
    with pytest.raises(ValueError):
        encode_own_hand_status(config, Table(config).observation())


def test_hand_mask_and_card_count():
    """Test hand mask and card count extraction."""
    config = GameConfig()
    table = _played_table(config)
    obs = table.observation()
    encoder = CanonicalObservationEncoder(config)

    mask = encoder.encode_hand_mask(obs)
    assert mask.shape == (layout.belief_length(config),)
    assert set(np.unique(mask).tolist()) <= {0.0, 1.0}

    count = encoder.encode_card_count(obs)
    assert count.dtype == np.float32
    assert count.shape == (25,)
    assert count.sum() == obs.deck_size + obs.num_hand_cards


def test_beliefs_have_belief_length():
    """Test beliefs have the belief length."""
    config = GameConfig(num_players=3)
    obs = _played_table(config).observation()
    encoder = CanonicalObservationEncoder(config)
    assert encoder.encode_v0_belief(obs).shape == (layout.belief_length(config),)
    assert encoder.encode_v1_belief(obs).shape == (layout.belief_length(config),)


def test_extract_belief_drops_hint_fields():
    """Test extraction drops the hint sub-fields."""
    config = toy_config()
    knowledge = np.arange(layout.card_knowledge_section_length(config), dtype=np.float32)
    belief = extract_belief(config, knowledge)
    # slot length 8, identity block is the first 4 entries of each slot
    assert belief.tolist() == [0, 1, 2, 3, 8, 9, 10, 11, 16, 17, 18, 19, 24, 25, 26, 27]
    with pytest.raises(ValueError):
        extract_belief(config, knowledge[:-1])


def test_run_section_checks_written_length():
    """Test run_section checks the written length."""
    section = np.zeros(10, dtype=np.float32)
    assert run_section("ok", section, lambda s: 10) == 10
    with pytest.raises(LayoutMismatchError) as excinfo:
        run_section("short", section, lambda s: 9)
    assert excinfo.value.expected == 10
    assert excinfo.value.written == 9


def test_all_hand_includes_own_cards():
    """Test the all-hand encoding one-hots every visible card."""
    config = GameConfig()
    obs = Table(config).observation(show_own_cards=True)
    all_hand = CanonicalObservationEncoder(config).encode_all_hand(obs)
    assert all_hand.shape == (layout.belief_length(config),)
    slots = all_hand.reshape(2, 5, 25)
    assert slots[0].argmax(axis=1).tolist() == [0, 0, 0, 1, 1]
    assert slots[1].argmax(axis=1).tolist() == [2, 2, 3, 3, 4]
    assert all_hand.sum() == 10


def test_all_hand_short_hand_and_hidden_cards():
    """Test absent slots stay zero and hidden cards are rejected."""
    config = toy_config()
    table = Table(config)
    for _ in range(4):
        table.discard(0, 0)
    table.discard(1, 1)
    encoder = CanonicalObservationEncoder(config)
    slots = encoder.encode_all_hand(table.observation(show_own_cards=True)).reshape(2, 2, 4)
    assert slots[1, 0].sum() == 1
    assert slots[1, 1].sum() == 0
    with pytest.raises(ValueError):
        encoder.encode_all_hand(table.observation())
