"""
User interface module for the game.

Provides the console front end: rich tables for the hero sheet, the combat
snapshot and the adventure log, and a prompt_toolkit prompt for commands.
"""

import shlex

from prompt_toolkit import ANSI, PromptSession
from rich.table import Table

from minirpg.combat.combat_session import CombatSnapshot
from minirpg.core.constants import HeroAction, TileKind
from minirpg.core.utils import ccapture, cprint, crule, make_bar
from minirpg.effects.event_system import ActionResult
from minirpg.entities.hero import Hero
from minirpg.ui.pacing import PacedCombat
from minirpg.world.game_session import GameSession
from minirpg.world.maps import CHEST_LOCATIONS
from minirpg.world.shop import ShopItem

# Number keys for combat actions, in menu order.
COMBAT_KEYS: dict[str, HeroAction] = {
    "1": HeroAction.ATTACK,
    "2": HeroAction.DEFEND,
    "3": HeroAction.HEAL,
    "4": HeroAction.RUN,
    "5": HeroAction.FIREBALL,
    "6": HeroAction.POISON_STRIKE,
    "7": HeroAction.STUN_BASH,
}

OVERWORLD_HELP = [
    ("grass", "Walk through tall grass (12% encounter chance)."),
    ("floor", "Walk on open floor (2% encounter chance)."),
    ("altar", "Step onto the red altar in the dungeon."),
    ("travel <town|dungeon>", "Go through the gate."),
    ("chest <n>", "Open the n-th chest of the current map."),
    ("sign", "Read the town sign."),
    ("elder", "Talk to the Elder."),
    ("buy <potion|weapon|armor>", "Buy from the shop (10g / 35g / 35g)."),
    ("potion", "Drink a potion."),
    ("save / load / new", "Manage the adventure."),
    ("log", "Show the full log."),
    ("quit", "Leave the game."),
]


def hero_table(hero: Hero) -> Table:
    """Builds the hero sheet."""
    table = Table(
        title=f"{hero.name} (Lv {hero.level})", pad_edge=False, show_header=False
    )
    table.add_column("Stat", style="bold")
    table.add_column("Value")
    hp_bar = make_bar(hero.hp, hero.hp_max, color="green")
    mp_bar = make_bar(hero.mp, hero.mp_max, color="blue")
    table.add_row("HP", f"{hp_bar} {hero.hp}/{hero.hp_max}")
    table.add_row("MP", f"{mp_bar} {hero.mp}/{hero.mp_max}")
    table.add_row("XP", f"{hero.xp}/{hero.xp_to_next}")
    table.add_row("ATK / DEF", f"{hero.effective_atk} / {hero.effective_def}")
    table.add_row("Gold", f"[yellow]{hero.gold}[/]")
    table.add_row("Potions", str(hero.potions))
    table.add_row("Weapon", hero.weapon.rarity.colorize(str(hero.weapon)))
    table.add_row("Armor", hero.armor.rarity.colorize(str(hero.armor)))
    if hero.statuses:
        labels = [kind.colorize(status.label) for kind, status in hero.statuses.items()]
        table.add_row("Status", ", ".join(labels))
    return table


def combat_table(snapshot: CombatSnapshot) -> Table:
    """Builds the combat panel from a snapshot."""
    title = f"{snapshot.enemy_name} (Lv {snapshot.enemy_level})"
    if snapshot.enemy_is_boss:
        title = f"[bold red]BOSS[/] {title}"
    table = Table(title=title, pad_edge=False, show_header=False)
    table.add_column("Who", style="bold")
    table.add_column("State")
    table.add_row(
        "Enemy",
        f"{make_bar(snapshot.enemy_hp, snapshot.enemy_hp_max, color='red')} "
        f"{snapshot.enemy_hp}/{snapshot.enemy_hp_max}",
    )
    intent = snapshot.enemy_intent
    table.add_row("Intent", f"{intent.emoji} {intent.display_name}")
    if snapshot.enemy_statuses:
        table.add_row("Enemy status", ", ".join(snapshot.enemy_statuses))
    table.add_row(
        "You",
        f"HP {snapshot.hero_hp}/{snapshot.hero_hp_max}  "
        f"MP {snapshot.hero_mp}/{snapshot.hero_mp_max}"
        + ("  [cyan](defending)[/]" if snapshot.hero_defending else ""),
    )
    if snapshot.hero_statuses:
        table.add_row("Your status", ", ".join(snapshot.hero_statuses))
    return table


def actions_table() -> Table:
    """Builds the combat action menu."""
    table = Table(title="Actions", pad_edge=False)
    table.add_column("#", style="cyan")
    table.add_column("Action", style="bold")
    table.add_column("MP", style="blue")
    for key, action in COMBAT_KEYS.items():
        cost = str(action.mp_cost) if action.is_skill else ""
        table.add_row(key, action.display_name, cost)
    return table


def help_table() -> Table:
    """Builds the overworld command list."""
    table = Table(title="Commands", pad_edge=False)
    table.add_column("Command", style="cyan")
    table.add_column("Effect")
    for command, effect in OVERWORLD_HELP:
        table.add_row(command, effect)
    return table


def print_log(lines: list[str], count: int | None = 6) -> None:
    """Prints the newest log lines, oldest of them first."""
    shown = lines if count is None else lines[:count]
    for line in reversed(shown):
        cprint(line, markup=False)


class GameInterface:
    """
    Command-line front end for a game session.

    Uses prompt_toolkit for input and rich for output. Combat is driven
    through PacedCombat so the enemy's reply is shown after a short delay.
    """

    def __init__(self, game: GameSession) -> None:
        """
        Initialize the GameInterface.

        Args:
            game (GameSession): The game to play.

        """
        self.game = game
        self.session: PromptSession = PromptSession()
        self.paced = PacedCombat(game, on_step=self._show_step)
        self.running = True

    def _show_step(self, result: ActionResult) -> None:
        for line in result.log_lines:
            cprint(f"  {line}", markup=False)

    def _show_combat(self) -> None:
        if self.game.combat is None:
            return
        cprint(combat_table(self.game.combat.renderable_snapshot()))

    async def _ask(self, prompt: str) -> str:
        answer = await self.session.prompt_async(ANSI(prompt))
        return answer.strip()

    async def run(self) -> None:
        """Runs the prompt loop until the player quits."""
        crule("Mini RPG", style="bold green")
        self.game.add_log(
            "Welcome! Explore town, accept the Elder's quest, and defeat the dungeon boss."
        )
        print_log(self.game.log, 1)
        cprint(help_table())
        while self.running:
            try:
                if self.game.in_combat:
                    await self._combat_turn()
                else:
                    await self._overworld_turn()
            except (EOFError, KeyboardInterrupt):
                self.running = False

    async def _combat_turn(self) -> None:
        pending = await self.paced.resume()
        if self._show_outcome(pending):
            return
        self._show_combat()
        answer = await self._ask(ccapture(actions_table()) + "\nAction > ")
        action = COMBAT_KEYS.get(answer)
        if action is None:
            try:
                action = HeroAction(answer.lower())
            except ValueError:
                cprint(f"[red]Unknown action '{answer}'.[/]")
                return
        self._show_outcome(await self.paced.submit(action))

    def _show_outcome(self, result: ActionResult) -> bool:
        if not result.session_outcome.is_terminal:
            return False
        crule(result.session_outcome.display_name, style="bold yellow")
        cprint(hero_table(self.game.hero))
        return True

    async def _overworld_turn(self) -> None:
        world = self.game.world
        answer = await self._ask("\n" + ccapture(f"[bold]{world.current_map}[/] > "))
        if not answer:
            return
        try:
            command, *args = shlex.split(answer.lower())
        except ValueError:
            cprint("[red]Could not parse the command.[/]")
            return
        top = self.game.log[0] if self.game.log else None
        await self._dispatch(command, args)
        self._print_new_log(top)

    def _print_new_log(self, top: str | None) -> None:
        log = self.game.log
        end = next((i for i, line in enumerate(log) if line is top), len(log))
        print_log(log[:end], None)

    async def _dispatch(self, command: str, args: list[str]) -> None:
        game = self.game
        if command == "grass":
            game.on_encounter_roll(TileKind.GRASS)
        elif command == "floor":
            game.on_encounter_roll(TileKind.FLOOR)
        elif command == "altar":
            if game.world.current_map != "dungeon":
                cprint("[red]The altar is in the dungeon.[/]")
            elif game.on_boss_tile_entered() is None:
                cprint("The altar is quiet now.")
        elif command == "travel" and args:
            game.travel(args[0])
        elif command == "chest" and args and args[0].isdigit():
            chests = CHEST_LOCATIONS.get(game.world.current_map, [])
            index = int(args[0]) - 1
            if 0 <= index < len(chests):
                x, y = chests[index]
                game.open_chest(game.world.current_map, x, y)
            else:
                cprint(f"[red]There are {len(chests)} chests here.[/]")
        elif command == "sign":
            game.read_sign()
        elif command == "elder":
            await self._talk_to_elder()
        elif command == "buy" and args:
            try:
                game.buy(ShopItem(args[0]))
            except ValueError:
                cprint(f"[red]The shop does not sell '{args[0]}'.[/]")
        elif command == "potion":
            game.use_potion()
        elif command == "save":
            game.save()
        elif command == "load":
            game.load()
        elif command == "new":
            game.new_game()
        elif command in ("hero", "stats"):
            cprint(hero_table(game.hero))
        elif command == "log":
            print_log(game.log, None)
        elif command in ("help", "?"):
            cprint(help_table())
        elif command in ("quit", "exit", "q"):
            self.running = False
        else:
            cprint(f"[red]Unknown command '{command}'. Type 'help'.[/]")

    async def _talk_to_elder(self) -> None:
        dialogue = self.game.talk_to_elder()
        crule(dialogue.speaker, style="bold cyan")
        cprint(dialogue.text)
        if dialogue.offers_quest:
            answer = (await self._ask("Accept? [y/n] > ")).lower()
            self.game.answer_elder(answer.startswith("y"))
