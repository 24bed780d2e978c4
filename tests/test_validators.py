"""Unit tests for league validation."""

from datetime import datetime

import pytest

from torn.league import League
from torn.models import Game, GamePlayer, GameTeam, LeagueTeam
from torn.validators import validate_game, validate_league, validate_team


@pytest.fixture
def league():
    """A consistent league with one committed-looking game."""
    league = League()
    league.add_player('p1', 'Alice')
    league.add_player('p2', 'Bob')
    league.add_team('Zappers', ['p1', 'p2'])
    league.all_games.append(
        Game(
            time=datetime(2024, 3, 5, 19, 0),
            teams=[GameTeam(team_id=0, score=900)],
            players=[
                GamePlayer('p1', game_team_id=0, score=500, rank=1),
                GamePlayer('p2', game_team_id=0, score=400, rank=2),
            ],
        )
    )
    league.relink()
    return league


class TestTeamValidation:
    """Tests for validate_team()."""

    def test_valid(self):
        assert validate_team(LeagueTeam(id=0, player_ids=['p1', 'p2'])) == []

    def test_duplicate_members(self):
        errors = validate_team(LeagueTeam(id=3, player_ids=['p1', 'p2', 'p1']))
        assert len(errors) == 1
        assert 'Team 3' in errors[0]
        assert 'p1' in errors[0]

    def test_blank_member(self):
        errors = validate_team(LeagueTeam(id=3, player_ids=['p1', '']))
        assert errors == ['Team 3 has a player with no id']


class TestGameValidation:
    """Tests for validate_game()."""

    def test_valid(self, league):
        assert validate_game(league.all_games[0]) == []

    def test_players_out_of_order(self, league):
        game = league.all_games[0]
        game.players.reverse()
        errors = validate_game(game)
        assert any('not ordered by score' in e for e in errors)

    def test_bad_ranks(self, league):
        game = league.all_games[0]
        game.players[1].rank = 1
        errors = validate_game(game)
        assert errors == [f'Game {game.time}: player ranks are not 1..2']

    def test_teams_out_of_order(self, league):
        game = league.all_games[0]
        game.teams.append(GameTeam(team_id=5, score=1000))
        errors = validate_game(game)
        assert any('teams are not ordered' in e for e in errors)


class TestLeagueValidation:
    """Tests for validate_league()."""

    def test_valid(self, league):
        errors, warnings = validate_league(league)
        assert errors == []
        assert warnings == []

    def test_key_mismatch(self, league):
        league.teams[4] = league.teams[0]
        errors, _ = validate_league(league)
        assert 'Team 0 is stored under id 4' in errors

    def test_member_not_league_player(self, league):
        league.teams[0].player_ids.append('ghost')
        errors, _ = validate_league(league)
        assert 'Team 0 member ghost is not a league player' in errors

    def test_games_out_of_order(self, league):
        league.all_games.insert(0, Game(time=datetime(2024, 3, 5, 20, 0)))
        errors, _ = validate_league(league)
        assert 'Games are not in time order' in errors

    def test_duplicate_game_times(self, league):
        league.all_games.append(Game(time=datetime(2024, 3, 5, 19, 0)))
        errors, _ = validate_league(league)
        assert 'More than one game at the same time' in errors

    def test_orphan_team_is_warning(self, league):
        """Test that legacy game teams for deleted teams warn but do not fail."""
        game = league.all_games[0]
        game.teams.append(GameTeam(team_id=9, score=100))
        game.players.append(GamePlayer('p9', game_team_id=9, score=100, rank=3))
        league.relink()

        errors, warnings = validate_league(league)

        assert errors == []
        assert f'Game {game.time}: team 9 is not a league team' in warnings
        assert any('player p9 is not linked' in w for w in warnings)
