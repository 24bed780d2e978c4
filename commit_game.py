#!/usr/bin/env python3
"""
Torn league game committer CLI

Lists the games on the configured laser game server, or commits one of them
into a league file. Teams are matched to the league's known teams by their
players; unmatched teams become new league teams.

Usage:
    python commit_game.py --league leagues/Tuesday_League.json --list
    python commit_game.py --league leagues/Tuesday_League.json --game 3
    python commit_game.py --league leagues/Tuesday_League.json --game 3 --team 0 --team 4
"""

import argparse
import sys
from pathlib import Path

from torn import League, get_server, validate_league
from torn.config import get_config, get_handicap_style, get_log_level
from torn.constants import DEFAULT_LEAGUE_FILE
from torn.handicap import HandicapError
from torn.logging_config import setup_logging


def print_games(games) -> None:
    for game in games:
        status = 'in progress' if game.in_progress else 'on server' if game.on_server else 'archived'
        print(f'  {game.game_id:>4}  {game.time:%Y-%m-%d %H:%M}  {game.description} ({status})')


def print_result(league: League, game) -> None:
    print('\n' + '=' * 60)
    print(f'{league.title}: {game.title or "game"} at {game.time:%Y-%m-%d %H:%M}')
    print('=' * 60)

    for game_team in game.teams:
        team = league.find_team(game_team.team_id)
        name = league.team_name(team) if team else f'Team {game_team.team_id}'
        points = f', {game_team.points:g} pts' if game_team.points else ''
        print(f'  {name}: {game_team.score}{points}')
        for game_player in game.team_players(game_team):
            player = league.find_player(game_player.player_id)
            player_name = player.display_name if player else game_player.player_id
            print(f'      {game_player.rank:>2}. {player_name}: {game_player.score}')


def main():
    parser = argparse.ArgumentParser(description="Commit laser game results into a Torn league file")
    parser.add_argument(
        "--league", "-l",
        default=DEFAULT_LEAGUE_FILE,
        help=f"Path to league JSON file, created if missing (default: {DEFAULT_LEAGUE_FILE})",
    )
    parser.add_argument(
        "--game", "-g",
        type=int,
        default=None,
        help="Server game id to commit",
    )
    parser.add_argument(
        "--team", "-t",
        type=int,
        action="append",
        default=None,
        help="League team id for each server team, in server order (overrides matching)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List games on the server and exit",
    )
    parser.add_argument(
        "--secret",
        action="store_true",
        help="Mark the committed game as secret",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress detailed output",
    )

    args = parser.parse_args()

    logger = setup_logging(level=get_log_level(), log_to_file=False, log_to_console=not args.quiet)
    server = get_server(get_config())
    games = sorted(server.get_games(), key=lambda g: g.time)

    if args.list or args.game is None:
        print(f"Games on {get_config().server} server:")
        print_games(games)
        sys.exit(0)

    server_game = next((g for g in games if g.game_id == args.game), None)
    if server_game is None:
        print(f"❌ No game {args.game} on server")
        sys.exit(1)
    if server_game.in_progress:
        print(f"⚠️  Game {args.game} is still in progress")
        sys.exit(1)

    league_path = Path(args.league)
    league = League(handicap_style=get_handicap_style())
    if league_path.exists():
        try:
            league.load(league_path)
        except HandicapError as e:
            print(f"❌ {league_path}: {e}")
            sys.exit(1)
    else:
        league.new_document(league_path)

    server.populate_game(server_game)
    if not server_game.players:
        print(f"⚠️  Game {args.game} has no players")
        sys.exit(0)

    rosters = league.build_rosters(server_game)
    if args.team:
        if len(args.team) != len(rosters):
            print(f"❌ Game has {len(rosters)} teams but {len(args.team)} --team ids were given")
            sys.exit(1)
        for roster, team_id in zip(rosters, args.team):
            roster.team_id = team_id

    try:
        game = league.commit_game(server_game, rosters)
    except KeyError as e:
        print(f"❌ {e.args[0]}")
        sys.exit(1)

    game.secret = args.secret

    errors, warnings = validate_league(league)
    for warning in warnings:
        logger.warning(warning)
    if errors:
        for error in errors:
            logger.error(error)
        print("❌ League failed validation; not saved")
        sys.exit(1)

    saved = league.save()

    if not args.quiet:
        print_result(league, game)
    print(f"League saved to {saved}")


if __name__ == "__main__":
    main()
