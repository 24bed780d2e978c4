"""Tests for reading and writing league documents."""

import json
from datetime import datetime

import pytest

from torn.handicap import Handicap, HandicapError, HandicapStyle
from torn.league import League
from torn.models import Colour, Game, GamePlayer, GameTeam
from torn.utils import dump_json


@pytest.fixture
def full_document():
    """A league document with every optional field set to a nonzero value."""
    return {
        'grid_high': 4,
        'grid_wide': 2,
        'grid_players': 8,
        'sort_mode': 1,
        'handicap_style': '+',
        'sort_by_rank': 1,
        'auto_update': 1,
        'update_teams': 1,
        'elim_multiplier': 2,
        'victory_points': [3.0, 1.0],
        'victory_points_high_score': 1.0,
        'victory_points_proportional': 0.5,
        'auto_victory_points': True,
        'teams': [
            {
                'name': 'Blasters',
                'id': 1,
                'handicap': '+50',
                'comment': 'Tuesday regulars',
                'players': [
                    {'name': 'Carol', 'id': 'p3', 'handicap': '90%', 'comment': 'captain'},
                ],
            },
            {
                'name': 'Zappers',
                'id': 0,
                'handicap': '110%',
                'comment': 'new this season',
                'players': [
                    {'name': 'Alice', 'id': 'p1', 'handicap': '-20', 'comment': 'left handed'},
                    {'name': 'Bob', 'id': 'p2', 'handicap': '+5', 'comment': 'rookie'},
                ],
            },
        ],
        'games': [
            {
                'title': 'League night',
                'time': '2024-03-05 19:30:00',
                'hits': 9,
                'secret': True,
                'teams': [
                    {
                        'team_id': 0,
                        'colour': 'Red',
                        'score': 1200,
                        'points': 4.5,
                        'adjustment': 100,
                        'points_adjustment': 0.5,
                    },
                    {
                        'team_id': 1,
                        'colour': 'Blue',
                        'score': 700,
                        'points': 1.5,
                        'adjustment': -50,
                        'points_adjustment': 0.25,
                    },
                ],
                'players': [
                    {
                        'team_id': 1,
                        'player_id': 'p3',
                        'pack': 'Pack07',
                        'score': 750,
                        'rank': 1,
                        'hits_by': 6,
                        'hits_on': 4,
                        'base_hits': 2,
                        'base_destroys': 1,
                        'base_denies': 1,
                        'base_denied': 3,
                        'yellow_cards': 1,
                        'red_cards': 1,
                        'colour': 'Blue',
                    },
                    {
                        'team_id': 0,
                        'player_id': 'p1',
                        'pack': 'Pack01',
                        'score': 600,
                        'rank': 2,
                        'hits_by': 5,
                        'hits_on': 3,
                        'base_hits': 1,
                        'base_destroys': 2,
                        'base_denies': 3,
                        'base_denied': 1,
                        'yellow_cards': 2,
                        'red_cards': 1,
                        'colour': 'Red',
                    },
                    {
                        'team_id': 0,
                        'player_id': 'p2',
                        'pack': 'Pack02',
                        'score': 500,
                        'rank': 3,
                        'hits_by': 4,
                        'hits_on': 2,
                        'base_hits': 3,
                        'base_destroys': 1,
                        'base_denies': 2,
                        'base_denied': 2,
                        'yellow_cards': 1,
                        'red_cards': 2,
                        'colour': 'Red',
                    },
                ],
            },
        ],
    }


def write(path, document):
    path.write_text(dump_json(document), encoding='utf-8')
    return path


class TestRoundTrip:
    """Tests for save(load(document))."""

    def test_byte_identical(self, tmp_path, full_document):
        """Test that a document with no zero fields is rewritten unchanged."""
        source = write(tmp_path / 'Tuesday_League.json', full_document)

        league = League()
        league.load(source)
        saved = league.save(tmp_path / 'copy.json')

        assert saved.read_bytes() == source.read_bytes()

    def test_loaded_values(self, tmp_path, full_document):
        league = League()
        league.load(write(tmp_path / 'Tuesday_League.json', full_document))

        assert league.title == 'Tuesday League'
        assert league.handicap_style is HandicapStyle.PLUS
        assert league.display.grid_players == 8
        assert league.victory_points == [3.0, 1.0]
        assert league.auto_victory_points is True
        assert league.teams[0].handicap == Handicap(110, HandicapStyle.PERCENT)
        assert league.players['p1'].handicap == Handicap(20, HandicapStyle.MINUS)
        assert league.teams[0].player_ids == ['p1', 'p2']

        game = league.all_games[0]
        assert game.time == datetime(2024, 3, 5, 19, 30)
        assert game.secret is True
        assert game.hits == 9
        assert game.teams[1].colour is Colour.BLUE
        assert game.players[0].base_denied == 3
        assert league.is_points_based()
        assert league.games(include_secret=False) == []

    def test_links_rebuilt_on_load(self, tmp_path, full_document):
        league = League()
        league.load(write(tmp_path / 'league.json', full_document))

        assert len(league.team_played(0)) == 1
        assert [a.game_player.score for a in league.player_played('p3')] == [750]
        assert league.links.unlinked == []

    def test_save_to_loaded_path(self, tmp_path, full_document):
        """Test that save() without a path rewrites the file the league came from."""
        source = write(tmp_path / 'league.json', full_document)
        league = League()
        league.load(source)
        league.all_games[0].title = 'Renamed'

        assert league.save() == source
        assert json.loads(source.read_text())['games'][0]['title'] == 'Renamed'
        assert sorted(p.name for p in tmp_path.iterdir()) == ['league.json']


class TestDefaults:
    """Tests for reading documents with fields left out."""

    def test_minimal_document(self, tmp_path):
        """Test that missing optional fields read as zero or empty."""
        path = write(
            tmp_path / 'league.json',
            {
                'teams': [{'id': 3, 'players': [{'id': 'p1'}]}],
                'games': [
                    {
                        'time': '2024-03-05 19:30:00',
                        'teams': [{'team_id': 3}],
                        'players': [{'player_id': 'p1', 'team_id': 3}],
                    }
                ],
            },
        )

        league = League()
        league.load(path)

        team = league.teams[3]
        assert team.name == ''
        assert team.handicap is None
        assert league.players['p1'].name == ''
        assert league.handicap_style is HandicapStyle.PERCENT
        assert league.victory_points == []
        assert league.auto_victory_points is False

        game = league.all_games[0]
        assert game.title == ''
        assert game.secret is False
        assert game.teams[0].score == 0
        assert game.teams[0].points == 0
        assert game.teams[0].colour is Colour.NONE
        assert game.players[0].hits_on == 0
        assert not league.is_points_based()

    def test_empty_document(self, tmp_path):
        league = League()
        league.load(write(tmp_path / 'league.json', {}))
        assert league.teams == {}
        assert league.all_games == []

    def test_malformed_numbers_default_to_zero(self, tmp_path):
        path = write(
            tmp_path / 'league.json',
            {
                'games': [
                    {
                        'time': '2024-03-05 19:30:00',
                        'teams': [{'team_id': 0, 'score': 'lots', 'points': None}],
                        'players': [{'player_id': 'p1', 'score': '12x', 'hits_on': ''}],
                    }
                ],
            },
        )

        league = League()
        league.load(path)

        game = league.all_games[0]
        assert game.teams[0].score == 0
        assert game.teams[0].points == 0
        assert game.players[0].score == 0

    def test_numeric_text_fields(self, tmp_path):
        """Test that ids and handicaps written as numbers are still read."""
        path = write(
            tmp_path / 'league.json',
            {'teams': [{'id': '2', 'handicap': 95, 'players': [{'id': 1234, 'name': 'Dee'}]}]},
        )

        league = League()
        league.load(path)

        assert league.teams[2].handicap == Handicap(95, HandicapStyle.PERCENT)
        assert league.teams[2].player_ids == ['1234']

    def test_secret_text(self, tmp_path):
        path = write(tmp_path / 'league.json', {'games': [{'time': '2024-03-05 19:30:00', 'secret': 'yes'}]})
        league = League()
        league.load(path)
        assert league.all_games[0].secret is True


class TestTimestamps:
    """Tests for the timestamp forms accepted on read."""

    @pytest.mark.parametrize(
        'game',
        [
            {'time': '2024-03-05 19:30:00'},
            {'time': '2024-03-05T19:30:00'},
            {'time': '2024/03/05 19:30:00'},
            {'time': '45356.8125'},
            {'game_time': 45356.8125},
            {'time': '', 'game_time': '45356.8125'},
        ],
    )
    def test_forms(self, tmp_path, game):
        league = League()
        league.load(write(tmp_path / 'league.json', {'games': [game]}))
        assert league.all_games[0].time == datetime(2024, 3, 5, 19, 30)

    def test_written_as_calendar_time(self, tmp_path):
        league = League()
        league.load(write(tmp_path / 'league.json', {'games': [{'game_time': 45356.8125}]}))
        league.save()

        document = json.loads((tmp_path / 'league.json').read_text())
        assert document['games'][0]['time'] == '2024-03-05 19:30:00'
        assert 'game_time' not in document['games'][0]

    def test_games_sorted_by_time(self, tmp_path):
        league = League()
        league.load(
            write(
                tmp_path / 'league.json',
                {'games': [{'time': '2024-03-05 20:00:00'}, {'time': '2024-03-05 19:00:00'}]},
            )
        )
        assert [g.time.hour for g in league.all_games] == [19, 20]

    def test_offset_dropped(self, tmp_path):
        """Test that ISO text with a UTC offset sorts alongside plain times."""
        league = League()
        league.load(
            write(
                tmp_path / 'league.json',
                {'games': [{'time': '2024-03-05 20:30:00'}, {'time': '2024-03-05T19:30:00+00:00'}]},
            )
        )
        assert [g.time for g in league.all_games] == [datetime(2024, 3, 5, 19, 30), datetime(2024, 3, 5, 20, 30)]
        assert league.all_games[0].time.tzinfo is None

    def test_microseconds_kept(self, tmp_path):
        league = League()
        league.all_games.append(Game(time=datetime(2024, 3, 5, 19, 30, 0, 123456)))
        league.save(tmp_path / 'league.json')

        reloaded = League()
        reloaded.load(tmp_path / 'league.json')
        assert reloaded.all_games[0].time == datetime(2024, 3, 5, 19, 30, 0, 123456)


class TestErrors:
    """Tests for documents that cannot be read."""

    def test_bad_handicap_raises(self, tmp_path):
        """Test that an unreadable handicap is reported, not defaulted."""
        path = write(tmp_path / 'league.json', {'teams': [{'id': 0, 'handicap': 'abc%'}]})
        with pytest.raises(HandicapError):
            League().load(path)

    def test_bad_player_handicap_raises(self, tmp_path):
        path = write(
            tmp_path / 'league.json',
            {'teams': [{'id': 0, 'players': [{'id': 'p1', 'handicap': '+many'}]}]},
        )
        with pytest.raises(HandicapError):
            League().load(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            League().load(tmp_path / 'nope.json')

    def test_not_an_object(self, tmp_path):
        path = tmp_path / 'league.json'
        path.write_text('[1, 2, 3]')
        with pytest.raises(ValueError):
            League().load(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'league.json'
        path.write_text('{"teams": [')
        with pytest.raises(json.JSONDecodeError):
            League().load(path)


class TestWrite:
    """Tests for what is left out of written documents."""

    @pytest.fixture
    def league(self, tmp_path):
        league = League()
        league.new_document(tmp_path / 'league.json')
        league.add_player('p1', 'Alice', handicap=Handicap.parse('+0'))
        league.add_player('p2', 'Bob')
        league.add_team('', ['p1', 'p2'], handicap=Handicap.parse('100%'))
        league.all_games.append(
            Game(
                time=datetime(2024, 3, 5, 19, 30),
                teams=[GameTeam(team_id=0, score=800)],
                players=[GamePlayer('p1', game_team_id=0, score=800, rank=1, colour=Colour.GREEN)],
            )
        )
        return league

    def saved(self, league):
        return json.loads(league.save().read_text())

    def test_default_handicaps_omitted(self, league):
        document = self.saved(league)
        assert 'handicap' not in document['teams'][0]
        assert 'handicap' not in document['teams'][0]['players'][0]

    def test_zero_fields_omitted(self, league):
        document = self.saved(league)
        team = document['games'][0]['teams'][0]
        player = document['games'][0]['players'][0]

        assert set(team) == {'team_id', 'colour', 'score'}
        assert 'hits_on' not in player
        assert 'red_cards' not in player
        assert 'secret' not in document['games'][0]
        assert 'victory_points_high_score' not in document
        assert 'auto_victory_points' not in document

    def test_derived_values_written(self, league):
        """Test that the team name and colour are written as they are displayed."""
        document = self.saved(league)
        assert document['teams'][0]['name'] == 'Alice and Bob'
        assert document['games'][0]['teams'][0]['colour'] == 'Green'
        assert document['games'][0]['hits'] == 0

    def test_orphan_team_written(self, league):
        league.all_games[0].teams.append(GameTeam(team_id=None, score=5))
        document = self.saved(league)
        assert document['games'][0]['teams'][1]['team_id'] == -1

    def test_new_document_title(self, league):
        assert league.title == 'league'

    def test_save_without_path(self):
        with pytest.raises(ValueError):
            League().save()
