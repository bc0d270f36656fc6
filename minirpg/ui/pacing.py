"""
Presentation pacing for combat.

Combat rules resolve synchronously. This wrapper only inserts a short pause
between the hero's action and each enemy turn so the player can read what
happened. The session refuses hero actions while the enemy holds the turn,
so the pause cannot be used to act twice.
"""

import asyncio
from collections.abc import Callable

from catchery import log_warning

from minirpg.core.constants import HeroAction, TurnOwner
from minirpg.effects.event_system import ActionResult
from minirpg.world.game_session import GameSession


class PacedCombat:
    """Drives the active combat session of a game with a delay before enemy turns."""

    def __init__(
        self,
        game: GameSession,
        delay: float | None = None,
        on_step: Callable[[ActionResult], None] | None = None,
    ) -> None:
        """
        Initialize the PacedCombat.

        Args:
            game (GameSession):
                The game whose active combat session is driven.
            delay (float | None):
                Seconds to wait before each enemy turn. Defaults to the
                game's configured delay.
            on_step (Callable[[ActionResult], None] | None):
                Called with the result of the hero's action and of every
                enemy turn as soon as each is resolved.

        """
        self.game = game
        self.delay = game.config.enemy_turn_delay if delay is None else delay
        self.on_step = on_step
        self._busy = False

    @property
    def busy(self) -> bool:
        """True while an exchange is being resolved."""
        return self._busy

    def _enemy_holds_turn(self) -> bool:
        combat = self.game.combat
        return combat is not None and combat.turn_owner == TurnOwner.ENEMY

    def _emit(self, result: ActionResult) -> None:
        if self.on_step is not None:
            self.on_step(result)

    async def submit(self, action: HeroAction | str) -> ActionResult:
        """
        Resolves a hero action, then the enemy turns that follow it, pausing
        before each enemy turn.

        Args:
            action (HeroAction | str):
                The hero action.

        Returns:
            ActionResult:
                The merged result of the whole exchange.

        """
        if self._busy:
            log_warning(
                "Ignoring hero action while the enemy is acting",
                {"action": str(action)},
            )
            return ActionResult()

        self._busy = True
        try:
            result = self.game.take_action(action, defer_enemy_turn=True)
            self._emit(result)
            if self._enemy_holds_turn():
                result.merge(await self._play_enemy_turns())
        finally:
            self._busy = False
        return result

    async def resume(self) -> ActionResult:
        """
        Plays the enemy turns still pending in the active session, such as
        those of a game saved while the enemy held the turn.

        Returns:
            ActionResult:
                The merged result of the enemy turns, empty if none were
                pending.

        """
        if self._busy:
            return ActionResult()
        self._busy = True
        try:
            return await self._play_enemy_turns()
        finally:
            self._busy = False

    async def _play_enemy_turns(self) -> ActionResult:
        result = ActionResult()
        while self._enemy_holds_turn():
            await asyncio.sleep(self.delay)
            step = self.game.resume_enemy_turn()
            self._emit(step)
            result.merge(step)
        return result
