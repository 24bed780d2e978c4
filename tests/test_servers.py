"""Tests for game servers."""

from datetime import datetime, timedelta

import pytest

from torn.models import ServerGame
from torn.schemas import TornConfig
from torn.servers import DemoServer, get_server

NOW = datetime(2024, 3, 5, 21, 7, 42)


class TestDemoServer:
    """Tests for the demo game server."""

    def test_game_times(self):
        """Test that games are 15 minutes apart and end before now."""
        games = DemoServer(game_count=4, now=NOW).get_games()

        assert [g.game_id for g in games] == [0, 1, 2, 3]
        assert games[0].time == datetime(2024, 3, 5, 20, 7)
        assert games[1].time - games[0].time == timedelta(minutes=15)
        assert all(g.end_time - g.time == timedelta(minutes=12) for g in games)
        assert all(g.on_server for g in games)

    def test_populate_is_repeatable(self):
        """Test that the same game always gets the same roster."""
        server = DemoServer(now=NOW)
        first = ServerGame(game_id=3, time=NOW)
        second = ServerGame(game_id=3, time=NOW)

        server.populate_game(first)
        server.populate_game(second)

        assert [(p.player_id, p.score, p.colour) for p in first.players] == [
            (p.player_id, p.score, p.colour) for p in second.players
        ]

    def test_populate_roster(self):
        server = DemoServer(players_per_game=8)
        game = ServerGame(game_id=5, time=NOW)
        server.populate_game(game)

        ids = [p.player_id for p in game.players]
        assert len(ids) == 8
        assert len(set(ids)) == 8
        for p in game.players:
            assert p.player_id.startswith('demo')
            assert p.alias
            assert p.server_team_id == int(p.colour)

    def test_different_games_differ(self):
        server = DemoServer()
        a = ServerGame(game_id=1, time=NOW)
        b = ServerGame(game_id=2, time=NOW)
        server.populate_game(a)
        server.populate_game(b)
        assert [p.player_id for p in a.players] != [p.player_id for p in b.players]

    def test_get_players(self):
        server = DemoServer()
        assert len(server.get_players()) == 14 * 14
        sharks = server.get_players('shark')
        assert len(sharks) == 14
        assert all('Shark' in p.alias for p in sharks)

    def test_roster_ids_match_known_players(self):
        """Test that populated players are players the server knows about."""
        server = DemoServer()
        game = ServerGame(game_id=7, time=NOW)
        server.populate_game(game)

        known = {p.id: p.alias for p in server.get_players()}
        for p in game.players:
            assert known[p.player_id] == p.alias


class TestGetServer:
    """Tests for choosing a server from config."""

    def test_demo(self):
        server = get_server(TornConfig(server='demo', demo_game_count=3))
        assert isinstance(server, DemoServer)
        assert len(server.get_games()) == 3

    def test_unknown(self):
        with pytest.raises(ValueError, match='Unknown game server'):
            get_server(TornConfig(server='laserforce'))
