"""
Tests for the combat session state machine.

Unless a test scripts otherwise, the `dice` fixture rolls no damage variance
and fails every probability check, so the enemy simply attacks.
"""

import pytest

from minirpg.combat.combat_session import (
    CombatRecord,
    CombatSession,
    escape_chance,
)
from minirpg.combat.encounter import build_boss
from minirpg.core.constants import (
    CombatantSide,
    EnemyIntent,
    HeroAction,
    QuestState,
    SessionOutcome,
    StatusChange,
    StatusKind,
    TurnOwner,
)
from minirpg.effects.status_effect import poison, stun
from minirpg.entities.enemy import Enemy


@pytest.fixture
def ogre():
    """A hard-hitting enemy: 12 ATK against the hero's 2 DEF."""
    return Enemy(
        name="Ogre",
        level=2,
        hp=50,
        hp_max=50,
        atk=12,
        defense=1,
        xp_reward=20,
        gold_reward=8,
    )


# ---- Hero actions ----


def test_attack_then_enemy_replies(session, hero, slime):
    """
    Test that an attack damages the enemy and the enemy replies in the same call.
    """
    result = session.resolve_hero_action(HeroAction.ATTACK)

    assert result.turn_consumed
    assert slime.hp == 11
    assert hero.hp == 28
    assert result.log_lines[0] == "You attack Slime for 5 damage!"
    assert "Slime attacks you for 2 damage!" in result.log_lines
    assert [(e.target, e.amount) for e in result.damage_events] == [
        (CombatantSide.ENEMY, 5),
        (CombatantSide.HERO, 2),
    ]
    assert session.turn_owner == TurnOwner.HERO
    assert result.session_outcome == SessionOutcome.IN_PROGRESS


def test_action_accepts_string_value(session, slime):
    """
    Test that actions may be submitted by their string value.
    """
    result = session.resolve_hero_action("attack")
    assert result.turn_consumed
    assert slime.hp == 11


def test_defend_is_consumed_by_next_hit(hero, ogre, world, quests, dice):
    """
    Test that Defend adds 3 DEF against exactly one incoming hit.
    """
    session = CombatSession(hero, ogre, world, quests, dice)

    session.resolve_hero_action(HeroAction.DEFEND)
    assert hero.hp == 30 - (12 - 5)
    assert not session.hero_defending

    session.resolve_hero_action(HeroAction.ATTACK)
    assert hero.hp == 23 - (12 - 2)


def test_heal_uses_round_half_up(session, hero):
    """
    Test that a potion restores round(35% of max HP) plus a 2-6 bonus.
    """
    hero.hp = 10
    result = session.resolve_hero_action(HeroAction.HEAL)

    # round(10.5) is 11, plus the midpoint bonus of 4.
    assert result.log_lines[0] == "You drink a potion and restore 15 HP."
    assert hero.potions == 1
    assert hero.hp == 25 - 2


def test_heal_without_potions_fails_and_passes_turn(session, hero, slime):
    """
    Test that healing with no potions fails but still gives the enemy its turn.
    """
    hero.potions = 0
    result = session.resolve_hero_action(HeroAction.HEAL)

    assert result.turn_consumed
    assert result.log_lines[0] == "No potions left!"
    assert session.last_action == "heal-fail"
    assert hero.hp == 28
    assert session.turn_owner == TurnOwner.HERO


def test_fireball_spends_mana_and_may_burn(session, hero, slime, dice):
    """
    Test Fireball damage, mana cost and the burn it can inflict.
    """
    dice.script(randoms=[0.1])
    result = session.resolve_hero_action(HeroAction.FIREBALL)

    assert hero.mp == 8
    # 9 from the hit, 3 from the burn tick at the end of the hero's turn.
    assert slime.hp == 16 - 9 - 3
    assert slime.statuses[StatusKind.BURN].remaining_turns == 2
    assert "Slime is burning!" in result.log_lines
    assert hero.hp == 28


def test_skill_without_mana_fails_and_passes_turn(session, hero, slime):
    """
    Test that a skill the hero cannot afford fails but still consumes the turn.
    """
    hero.mp = 3
    result = session.resolve_hero_action(HeroAction.FIREBALL)

    assert result.turn_consumed
    assert result.log_lines[0] == "Not enough MP for Fireball!"
    assert hero.mp == 3
    assert slime.hp == 16
    assert hero.hp == 28
    assert session.last_action == "fireball-fail"


def test_poison_strike_scales_with_level(session, hero, slime):
    """
    Test that Poison Strike poisons for 2 + level // 3 per turn.
    """
    hero.level = 3
    session.resolve_hero_action(HeroAction.POISON_STRIKE)

    status = slime.statuses[StatusKind.POISON]
    assert status.damage_per_turn == 3
    assert status.remaining_turns == 3
    assert slime.hp == 16 - 5 - 3
    assert hero.mp == 9


def test_stun_skips_exactly_one_enemy_turn(session, hero, slime, dice):
    """
    Test that a stunned enemy loses one turn and acts normally afterwards.
    """
    dice.script(randoms=[0.1])
    result = session.resolve_hero_action(HeroAction.STUN_BASH)

    assert slime.hp == 10
    assert hero.hp == 30
    assert "Slime is stunned and skips its turn!" in result.log_lines
    assert not slime.has_status(StatusKind.STUN)
    assert [(e.kind, e.change) for e in result.status_events] == [
        (StatusKind.STUN, StatusChange.APPLIED),
        (StatusKind.STUN, StatusChange.EXPIRED),
    ]
    assert session.turn_owner == TurnOwner.HERO

    session.resolve_hero_action(HeroAction.ATTACK)
    assert hero.hp == 28


def test_run_success_ends_session_without_enemy_tick(session, slime, dice):
    """
    Test that a successful escape ends the session before enemy statuses tick.
    """
    slime.add_status(poison(3, 2))
    dice.script(randoms=[0.1])
    result = session.resolve_hero_action(HeroAction.RUN)

    assert result.session_outcome == SessionOutcome.ESCAPE
    assert session.is_over
    assert result.log_lines == ["You escape!"]
    assert slime.hp == 16
    assert slime.statuses[StatusKind.POISON].remaining_turns == 3


def test_run_failure_passes_turn(session, hero, dice):
    """
    Test that a failed escape gives the enemy its turn.
    """
    dice.script(randoms=[0.5])
    result = session.resolve_hero_action(HeroAction.RUN)

    assert result.log_lines[0] == "You fail to run away!"
    assert session.last_action == "run-fail"
    assert hero.hp == 28
    assert not session.is_over


@pytest.mark.parametrize(
    "hero_level, enemy_level, expected",
    [
        (1, 1, 0.45),
        (3, 1, 0.55),
        (1, 99, 0.15),
        (99, 1, 0.9),
    ],
)
def test_escape_chance_is_clamped(hero_level, enemy_level, expected):
    """
    Test the escape probability and its 0.15 / 0.9 bounds.
    """
    assert escape_chance(hero_level, enemy_level) == pytest.approx(expected)


# ---- Enemy actions ----


def test_enemy_poison_bite_then_hero_tick(session, hero, dice):
    """
    Test that Poison Bite poisons the hero, whose poison ticks at once.
    """
    dice.script(randoms=[0.1])
    result = session.resolve_hero_action(HeroAction.ATTACK)

    assert session.enemy.intent == EnemyIntent.POISON
    assert "Slime uses Poison Bite for 2 damage!" in result.log_lines
    assert "You are poisoned!" in result.log_lines
    assert hero.hp == 30 - 2 - 2
    assert hero.statuses[StatusKind.POISON].remaining_turns == 2


def test_enemy_arcane_bolt(session, hero, dice):
    """
    Test that Arcane Bolt hits with 3 extra attack.
    """
    dice.script(randoms=[0.5, 0.1])
    result = session.resolve_hero_action(HeroAction.ATTACK)

    assert "Slime casts Arcane Bolt for 5 damage!" in result.log_lines
    assert hero.hp == 25


def test_enemy_enrage_keeps_defend_bonus(session, hero, slime, dice):
    """
    Test that Enrage raises attack once and does not consume the hero's Defend.
    """
    slime.hp = 5
    dice.script(randoms=[0.1])
    result = session.resolve_hero_action(HeroAction.DEFEND)

    assert "Slime becomes enraged! (+ATK)" in result.log_lines
    assert slime.enraged
    assert slime.atk == 7
    assert hero.hp == 30
    assert session.hero_defending


def test_enemy_defend_when_hurting(session, hero, slime, dice):
    """
    Test that an enemy suffering damage over time may brace instead of attacking.
    """
    slime.add_status(poison(3, 2))
    dice.script(randoms=[0.1])
    result = session.resolve_hero_action(HeroAction.DEFEND)

    assert "Slime braces for impact." in result.log_lines
    assert slime.hp == 14
    assert hero.hp == 30
    assert session.hero_defending


def test_stunned_hero_loses_turn(session, hero):
    """
    Test that a stunned hero loses one turn, letting the enemy act twice.
    """
    hero.add_status(stun(1))
    result = session.resolve_hero_action(HeroAction.ATTACK)

    assert "You are stunned and lose your turn!" in result.log_lines
    assert result.log_lines.count("Slime attacks you for 2 damage!") == 2
    assert hero.hp == 26
    assert not hero.has_status(StatusKind.STUN)
    assert session.turn_owner == TurnOwner.HERO


def test_deferred_enemy_turn(session, hero, slime):
    """
    Test that a deferred enemy turn waits for resolve_enemy_turn, and that the
    hero cannot act in between.
    """
    result = session.resolve_hero_action(HeroAction.ATTACK, defer_enemy_turn=True)
    assert session.turn_owner == TurnOwner.ENEMY
    assert hero.hp == 30
    assert result.log_lines == ["You attack Slime for 5 damage!"]

    rejected = session.resolve_hero_action(HeroAction.ATTACK)
    assert not rejected.turn_consumed
    assert slime.hp == 11

    enemy_result = session.resolve_enemy_turn()
    assert enemy_result.turn_consumed
    assert hero.hp == 28
    assert session.turn_owner == TurnOwner.HERO


def test_enemy_turn_out_of_order_is_noop(session, hero):
    """
    Test that resolving an enemy turn during the hero's turn does nothing.
    """
    result = session.resolve_enemy_turn()
    assert not result.turn_consumed
    assert hero.hp == 30


# ---- Outcomes ----


def test_direct_hit_victory(session, hero, slime):
    """
    Test that killing the enemy with a hit ends the session with rewards.
    """
    slime.hp = 3
    result = session.resolve_hero_action(HeroAction.ATTACK)

    assert result.session_outcome == SessionOutcome.VICTORY
    assert result.log_lines[:3] == [
        "You attack Slime for 5 damage!",
        "Slime is defeated.",
        "Victory! You gain +10 XP and +4 gold.",
    ]
    assert hero.xp == 10
    assert hero.gold == 4
    assert hero.hp == 30


def test_status_tick_victory(session, hero, slime):
    """
    Test that an enemy killed by its own poison tick is a victory.
    """
    slime.hp = 2
    slime.add_status(poison(3, 3))
    result = session.resolve_hero_action(HeroAction.DEFEND)

    assert result.session_outcome == SessionOutcome.VICTORY
    assert "Slime is defeated." in result.log_lines
    assert hero.xp == 10


def test_direct_hit_defeat(session, hero):
    """
    Test that the hero dropping to 0 HP from a hit takes the defeat path.
    """
    hero.hp = 1
    result = session.resolve_hero_action(HeroAction.ATTACK)

    assert result.session_outcome == SessionOutcome.DEFEAT
    assert hero.hp == hero.hp_max


def test_poison_tick_defeat_takes_full_defeat_path(session, hero, slime, dice):
    """
    Test that a lethal poison tick on the hero applies the gold penalty and the
    full restore, exactly like a lethal hit.
    """
    slime.hp = 5
    hero.hp = 2
    hero.gold = 100
    hero.mp = 1
    hero.add_status(poison(3, 2))
    # The slime enrages instead of attacking, so only the tick can kill.
    dice.script(randoms=[0.1])
    result = session.resolve_hero_action(HeroAction.DEFEND)

    assert result.session_outcome == SessionOutcome.DEFEAT
    assert session.outcome == SessionOutcome.DEFEAT
    assert "You are defeated... You wake up at full HP but lose some gold." in result.log_lines
    assert "You dropped 25 gold in the chaos." in result.log_lines
    assert hero.gold == 75
    assert hero.hp == 30
    assert hero.mp == 12


def test_boss_flag_only_set_on_victory(hero, world, quests, dice):
    """
    Test that escaping from the boss leaves the world untouched and beating it
    sets the flag and advances the quest.
    """
    quests.elder = QuestState.ACTIVE

    dice.script(randoms=[0.1])
    escaped = CombatSession(hero, build_boss(hero.level), world, quests, dice)
    escaped.resolve_hero_action(HeroAction.RUN)
    assert escaped.outcome == SessionOutcome.ESCAPE
    assert not world.boss_defeated
    assert quests.elder == QuestState.ACTIVE

    boss = build_boss(hero.level)
    boss.hp = 2
    beaten = CombatSession(hero, boss, world, quests, dice)
    result = beaten.resolve_hero_action(HeroAction.ATTACK)
    assert result.session_outcome == SessionOutcome.VICTORY
    assert world.boss_defeated
    assert quests.elder == QuestState.BOSS_DEFEATED
    assert "Boss defeated! Return to the Elder in town." in result.log_lines


def test_actions_after_end_are_noops(session, slime, dice):
    """
    Test that nothing can be submitted once the session has ended.
    """
    dice.script(randoms=[0.1])
    session.resolve_hero_action(HeroAction.RUN)

    result = session.resolve_hero_action(HeroAction.ATTACK)
    assert not result.turn_consumed
    assert result.session_outcome == SessionOutcome.ESCAPE
    assert slime.hp == 16


def test_unknown_action_is_noop(session, slime):
    """
    Test that an unknown action string is rejected without consuming the turn.
    """
    result = session.resolve_hero_action("dance")
    assert not result.turn_consumed
    assert slime.hp == 16
    assert session.turn_owner == TurnOwner.HERO


# ---- Snapshot and record ----


def test_snapshot_is_detached(session, slime):
    """
    Test that a snapshot does not change when the session does.
    """
    slime.add_status(poison(2, 1))
    snapshot = session.renderable_snapshot()
    slime.hp = 1
    slime.statuses.clear()

    assert snapshot.enemy_hp == 16
    assert snapshot.enemy_statuses == ["Poison(2)"]
    assert snapshot.hero_hp == 30
    assert snapshot.turn_owner == TurnOwner.HERO


def test_record_restores_session_in_progress(session, hero, slime, world, quests, dice):
    """
    Test that a session restored from its record keeps the turn owner, the
    pending Defend and the enemy's statuses.
    """
    session.resolve_hero_action(HeroAction.DEFEND, defer_enemy_turn=True)
    slime.add_status(poison(2, 1))

    record = CombatRecord.model_validate_json(session.to_record().model_dump_json())
    restored = CombatSession.from_record(record, hero, world, quests, dice)

    assert restored.turn_owner == TurnOwner.ENEMY
    assert restored.hero_defending
    assert restored.last_action == "defend"
    assert restored.enemy.statuses[StatusKind.POISON].remaining_turns == 2
    assert restored.enemy is not slime
