"""
Game session module for the game.

The GameSession owns everything that outlives a single encounter: the hero,
the world flags, quest progress, the adventure log and the world turn
counter. It starts combat sessions when the overworld asks for one, feeds
their results into the log, and releases them once they end.
"""

from pathlib import Path

from catchery import log_warning
from pydantic import BaseModel, Field

from minirpg.combat.combat_session import CombatSession, potion_heal_amount
from minirpg.combat.encounter import EncounterGenerator, build_boss
from minirpg.core.config import GameConfig
from minirpg.core.constants import QuestState, TileKind, TurnOwner
from minirpg.core.content import ContentRepository
from minirpg.core.logging import log_info
from minirpg.core.rng import Dice
from minirpg.effects.event_system import ActionResult
from minirpg.entities.enemy import Enemy, EnemyArchetype
from minirpg.entities.hero import Hero
from minirpg.world import loot, shop
from minirpg.world.maps import MAP_NAMES, chest_key
from minirpg.world.persistence import SaveError, SaveRecord, read_save, write_save
from minirpg.world.state import QuestLog, WorldState

ELDER_QUEST_GOLD = 80
ELDER_QUEST_POTIONS = 3

SIGN_TEXT = "Beware the tall grass. Treasure lies beyond the walls."


class Dialogue(BaseModel):
    """A piece of NPC dialogue for the front end to show."""

    speaker: str = Field(
        description="Who is talking.",
    )
    text: str = Field(
        description="What they say.",
    )
    offers_quest: bool = Field(
        default=False,
        description="True if the player may accept or decline a quest.",
    )


class GameSession:
    """
    Owns the persistent state of one adventure and the active encounter.

    At most one CombatSession is active at a time. While it is, overworld
    actions (travel, chests, shopping, potions) are refused.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        dice: Dice | None = None,
        archetypes: list[EnemyArchetype] | None = None,
    ) -> None:
        """
        Initialize the GameSession with a new adventure.

        Args:
            config (GameConfig | None):
                Session settings. Defaults to the standard configuration.
            dice (Dice | None):
                The random source. Defaults to one seeded from the config.
            archetypes (list[EnemyArchetype] | None):
                Random encounter pool. Defaults to the content data.

        """
        self.config = config or GameConfig()
        self.dice = dice or Dice(self.config.seed)
        if archetypes is None:
            archetypes = ContentRepository(self.config.data_dir).archetype_pool()
        self.encounters = EncounterGenerator(self.dice, archetypes, self.config)

        self.hero = Hero()
        self.world = WorldState()
        self.quests = QuestLog()
        self.log: list[str] = []
        self.turn = 0
        self.combat: CombatSession | None = None

    # ==========================================================================
    # LOG
    # ==========================================================================

    def add_log(self, message: str) -> None:
        """Adds a line to the top of the adventure log, stamped with the turn."""
        self.log.insert(0, f"[{self.turn:03d}] {message}")
        del self.log[self.config.log_capacity :]

    def _log_result(self, result: ActionResult) -> None:
        for line in result.log_lines:
            self.add_log(line)

    def new_game(self) -> None:
        """Starts a fresh adventure, discarding any encounter in progress."""
        self.hero = Hero()
        self.world = WorldState()
        self.quests = QuestLog()
        self.log = []
        self.turn = 0
        self.combat = None
        self.add_log("New adventure begins!")

    # ==========================================================================
    # ENCOUNTERS
    # ==========================================================================

    @property
    def in_combat(self) -> bool:
        return self.combat is not None

    def _refuse_in_combat(self, what: str) -> bool:
        if self.combat is None:
            return False
        log_warning(
            f"Cannot {what} during combat",
            {"enemy": self.combat.enemy.name},
        )
        return True

    def _start_combat(self, enemy: Enemy) -> None:
        self.combat = CombatSession(
            self.hero, enemy, self.world, self.quests, self.dice
        )
        log_info(
            f"Combat started against {enemy.name}",
            {"level": enemy.level, "boss": enemy.is_boss},
        )

    def on_encounter_roll(self, tile: TileKind) -> Enemy | None:
        """
        Rolls for a random encounter after the hero steps onto a tile.

        Args:
            tile (TileKind):
                The tile stepped onto.

        Returns:
            Enemy | None:
                The enemy of the new encounter, or None if nothing happened.

        """
        if self._refuse_in_combat("move"):
            return None
        enemy = self.encounters.roll_encounter(tile, self.hero.level)
        if enemy is None:
            self.add_log("You move.")
            self.turn += 1
            return None
        self._start_combat(enemy)
        self.add_log(f"A wild {enemy.name} appears!")
        return enemy

    def on_boss_tile_entered(self) -> Enemy | None:
        """
        Starts the boss fight when the hero steps onto the altar.

        Returns:
            Enemy | None:
                The boss, or None once it has been defeated.

        """
        if self._refuse_in_combat("enter the altar"):
            return None
        if self.world.boss_defeated:
            return None
        boss = build_boss(self.hero.level)
        self._start_combat(boss)
        self.add_log("A terrifying presence blocks your path... THE BOSS attacks!")
        return boss

    # ==========================================================================
    # COMBAT
    # ==========================================================================

    def take_action(self, action: str, defer_enemy_turn: bool = False) -> ActionResult:
        """
        Submits a hero action to the active combat session.

        Args:
            action (str):
                The hero action (a HeroAction or its value).
            defer_enemy_turn (bool):
                Leave the enemy's reply to `resume_enemy_turn`.

        Returns:
            ActionResult:
                The result of the action. Without an active session the
                action is a no-op.

        """
        if self.combat is None:
            log_warning("Ignoring hero action outside of combat", {"action": str(action)})
            return ActionResult()
        result = self.combat.resolve_hero_action(action, defer_enemy_turn)
        self._after_combat_step(result)
        return result

    def resume_enemy_turn(self) -> ActionResult:
        """Resolves one deferred enemy turn of the active combat session."""
        if self.combat is None:
            return ActionResult()
        result = self.combat.resolve_enemy_turn()
        self._after_combat_step(result)
        return result

    def _after_combat_step(self, result: ActionResult) -> None:
        self._log_result(result)
        if self.combat is None or not result.turn_consumed:
            return
        if self.combat.is_over:
            self.combat = None
            self.turn += 1
        elif self.combat.turn_owner == TurnOwner.HERO:
            self.turn += 1

    # ==========================================================================
    # OVERWORLD
    # ==========================================================================

    def use_potion(self) -> bool:
        """
        Drinks a potion outside of combat.

        Returns:
            bool:
                True if a potion was drunk.

        """
        if self._refuse_in_combat("use a potion from the bag"):
            return False
        if self.hero.potions <= 0:
            self.add_log("No potions left.")
            return False
        self.hero.potions -= 1
        amount = potion_heal_amount(self.hero, self.dice)
        self.hero.adjust_hp(amount)
        self.add_log(f"You drink a potion and restore {amount} HP.")
        self.turn += 1
        return True

    def travel(self, map_name: str) -> bool:
        """
        Travels through the gate to another map.

        Args:
            map_name (str):
                'town' or 'dungeon'.

        Returns:
            bool:
                True if the hero travelled.

        """
        if self._refuse_in_combat("travel"):
            return False
        if map_name not in MAP_NAMES:
            log_warning(f"Unknown map '{map_name}'", {"known": list(MAP_NAMES)})
            return False
        self.world.current_map = map_name
        self.add_log(f"You arrive at: {map_name}.")
        self.turn += 1
        return True

    def read_sign(self) -> str:
        """Reads the town sign."""
        self.world.sign_read = True
        self.add_log(f"Sign: '{SIGN_TEXT}'")
        self.turn += 1
        return SIGN_TEXT

    def open_chest(self, map_name: str, x: int, y: int) -> bool:
        """
        Opens the chest at a position. Each chest can be looted once.

        Returns:
            bool:
                True if the chest had loot in it.

        """
        if self._refuse_in_combat("open a chest"):
            return False
        key = chest_key(map_name, x, y)
        looted = False
        if key in self.world.opened_chests:
            self.add_log("The chest is empty.")
        else:
            self.world.opened_chests.add(key)
            self.add_log(f"You open the chest: {loot.open_chest(self.hero, self.dice)}!")
            looted = True
        self.turn += 1
        return looted

    def buy(self, item: shop.ShopItem) -> bool:
        """Buys an item at the town shop."""
        if self._refuse_in_combat("shop"):
            return False
        bought, message = shop.buy(self.hero, item, self.dice)
        self.add_log(message)
        if bought:
            self.turn += 1
        return bought

    # ==========================================================================
    # ELDER QUEST
    # ==========================================================================

    def talk_to_elder(self) -> Dialogue:
        """
        Talks to the town elder.

        The elder offers the quest, reminds the hero where to go, or hands out
        the reward once the boss has been defeated.

        Returns:
            Dialogue:
                What the elder says.

        """
        state = self.quests.elder
        if state == QuestState.NOT_STARTED:
            return Dialogue(
                speaker="Elder",
                text=(
                    "Traveler... a dark presence lurks in the dungeon.\n"
                    "Defeat the beast on the red altar and return.\n\n"
                    "Will you accept this quest?"
                ),
                offers_quest=True,
            )
        self.turn += 1
        if state == QuestState.ACTIVE:
            return Dialogue(
                speaker="Elder",
                text=(
                    "The dungeon gate is to the southeast.\n"
                    "Find the red altar and defeat the beast."
                ),
            )
        if state == QuestState.BOSS_DEFEATED:
            self.hero.gold += ELDER_QUEST_GOLD
            self.hero.potions += ELDER_QUEST_POTIONS
            self.quests.elder = QuestState.COMPLETED
            self.add_log(
                f"Quest complete! +{ELDER_QUEST_GOLD} gold, "
                f"+{ELDER_QUEST_POTIONS} potions."
            )
            return Dialogue(
                speaker="Elder",
                text=(
                    "You did it! The town is safe.\n"
                    "Take this reward: 80 gold and a potion stash."
                ),
            )
        return Dialogue(
            speaker="Elder",
            text=(
                "You've already done a great deed.\n"
                "Train, explore, and grow stronger."
            ),
        )

    def answer_elder(self, accept: bool) -> None:
        """Accepts or declines the elder's quest offer."""
        if self.quests.elder != QuestState.NOT_STARTED:
            log_warning(
                "The elder has no quest to offer",
                {"quest_state": str(self.quests.elder)},
            )
            return
        if accept:
            self.quests.elder = QuestState.ACTIVE
            self.add_log("Quest accepted: Defeat the dungeon boss.")
        else:
            self.add_log("You decline for now.")
        self.turn += 1

    # ==========================================================================
    # SAVE / LOAD
    # ==========================================================================

    def to_record(self) -> SaveRecord:
        """Returns a detached record of the whole session."""
        record = SaveRecord(
            hero=self.hero.model_copy(deep=True),
            world=self.world.model_copy(deep=True),
            quests=self.quests.model_copy(deep=True),
            turn=self.turn,
            log=list(self.log),
            combat=self.combat.to_record() if self.combat else None,
        )
        record.meta.seed = self.dice.seed
        return record

    def restore(self, record: SaveRecord) -> None:
        """Replaces the session state with the contents of a record."""
        self.hero = record.hero.model_copy(deep=True)
        self.world = record.world.model_copy(deep=True)
        self.quests = record.quests.model_copy(deep=True)
        self.turn = record.turn
        self.log = list(record.log)
        self.combat = None
        if record.combat is not None:
            self.combat = CombatSession.from_record(
                record.combat, self.hero, self.world, self.quests, self.dice
            )

    def save(self, path: Path | None = None) -> Path:
        """Writes the session to a save file."""
        path = path or self.config.save_path
        write_save(self.to_record(), path)
        self.add_log("Game saved.")
        log_info("Game saved", {"path": str(path)})
        return path

    def load(self, path: Path | None = None) -> bool:
        """
        Loads the session from a save file.

        A missing or malformed save leaves the current state untouched and
        adds a notice to the log.

        Returns:
            bool:
                True if the save was loaded.

        """
        path = path or self.config.save_path
        try:
            record = read_save(path)
        except FileNotFoundError:
            self.add_log("No save found.")
            return False
        except SaveError as e:
            log_warning("Rejected save file", {"path": str(path), "error": str(e)})
            self.add_log("Failed to load save.")
            return False
        self.restore(record)
        self.add_log(f"Loaded save ({record.meta.saved_at or 'unknown time'}).")
        return True
