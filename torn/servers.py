"""
Laser game servers: where finished games and their rosters come from.

The league engine only depends on the LaserGameServer interface. Which
implementation is used is chosen by the 'server' config setting.
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional, Protocol

from .models import Colour, ServerGame, ServerPlayer
from .schemas import TornConfig

logger = logging.getLogger('torn.servers')


@dataclass
class KnownPlayer:
    """A player registered on a game server."""
    id: str
    alias: str
    name: str = ''


class LaserGameServer(Protocol):
    """Source of games and rosters for committing into a league."""

    def get_games(self) -> list[ServerGame]:
        """Games held on the server, with id, description, times and on_server set."""
        ...

    def populate_game(self, server_game: ServerGame) -> None:
        """Fill server_game.players with the players of that game."""
        ...

    def get_players(self, mask: str = '') -> list[KnownPlayer]:
        """Players known to the server whose alias contains mask."""
        ...


ADJECTIVES = (
    'Actual ', 'Battle ', 'Cyber ', 'Dark ', 'Delta ', 'Elite ', 'Inter ',
    'Laser ', 'Mega ', 'Phasor ', 'Super ', 'Ultra ', 'Vector ', 'Zone ',
)
NOUNS = (
    'Ace', 'Blaster', 'Blazer', 'Chaser', 'Crystal', 'Dueller', 'Max',
    'Rogue', 'Runner', 'Shark', 'Star', 'Stunner', 'Trekker', 'Warrior',
)


class DemoServer:
    """
    A made-up game server for trying things out without real hardware.

    Games are spaced 15 minutes apart, the last one ending around now.
    Each game's roster is generated from a random seed of its game id, so
    populating the same game twice gives the same players and scores.
    Players are split into server teams by colour.
    """

    def __init__(self, game_count: int = 10, players_per_game: int = 10, now: Optional[datetime] = None):
        self.game_count = game_count
        self.players_per_game = players_per_game
        self.now = now

    def get_games(self) -> list[ServerGame]:
        now = (self.now or datetime.now()).replace(second=0, microsecond=0)
        start = now - timedelta(minutes=15 * self.game_count)

        games = []
        for i in range(self.game_count):
            time = start + timedelta(minutes=15 * i)
            games.append(
                ServerGame(
                    game_id=i,
                    time=time,
                    description='Demo Game',
                    end_time=time + timedelta(minutes=12),
                    on_server=True,
                    in_progress=time + timedelta(minutes=12) > now,
                )
            )
        return games

    def populate_game(self, server_game: ServerGame) -> None:
        r = random.Random(server_game.game_id)
        slots = r.sample(range(len(ADJECTIVES) * len(NOUNS)), self.players_per_game)

        players = []
        for slot in slots:
            x, y = divmod(slot, len(NOUNS))
            colour = Colour(r.randint(1, len(Colour) - 1))
            pack = r.randint(1, 29)
            players.append(
                ServerPlayer(
                    player_id=f'demo{x * 10}{y}',
                    alias=f'{ADJECTIVES[x]}{NOUNS[y]}',
                    colour=colour,
                    score=r.randrange(-100, 1000) * 10 + r.randrange(0, 3) * 2001,
                    pack=f'Pack{pack:02d}',
                    pack_name=f'Pack {pack}',
                    server_player_id=slot,
                    server_team_id=int(colour),
                )
            )

        server_game.players = players
        logger.debug(f'Demo game {server_game.game_id}: {len(players)} players')

    def get_players(self, mask: str = '') -> list[KnownPlayer]:
        players = []
        for x, adjective in enumerate(ADJECTIVES):
            for y, noun in enumerate(NOUNS):
                alias = f'{adjective}{noun}'
                if mask.lower() in alias.lower():
                    players.append(KnownPlayer(id=f'demo{x * 10}{y}', alias=alias, name=alias))
        return players


ServerFactory = Callable[[TornConfig], LaserGameServer]

SERVERS: dict[str, ServerFactory] = {
    'demo': lambda config: DemoServer(game_count=config.demo_game_count),
}


def get_server(config: Optional[TornConfig] = None) -> LaserGameServer:
    """
    Create the game server named by config.server.

    Args:
        config: Settings to use (default: the application config)

    Raises:
        ValueError: If no server of that name is registered
    """
    if config is None:
        from .config import get_config
        config = get_config()

    factory = SERVERS.get(config.server)
    if factory is None:
        raise ValueError(f'Unknown game server {config.server!r}; known: {", ".join(sorted(SERVERS))}')

    logger.debug(f'Using {config.server} game server')
    return factory(config)
