#!/usr/bin/env python3
"""
League Validation Script

Loads league files, checks them for broken links and ordering, and compares
each stored team score against a fresh calculation from its players' scores
and the team handicap. Outputs a list of discrepancies for review.

Usage:
    python scripts/validate_league.py leagues/Tuesday_League.json
    python scripts/validate_league.py leagues/*.json --summary
"""

import argparse
import sys
from pathlib import Path
from typing import List

from torn import League, validate_league
from torn.committer import team_score
from torn.handicap import HandicapError


def rescore_league(league: League, tolerance: int = 0) -> tuple[List[dict], int]:
    """
    Recalculate every linked game team's score.

    Args:
        league: A loaded league
        tolerance: Allow differences up to this amount (default 0 = exact match)

    Returns:
        Tuple of (discrepancies list, total game teams checked)
    """
    discrepancies = []
    checked = 0

    for game in league.all_games:
        for game_team in game.teams:
            team = league.find_team(game_team.team_id)
            if team is None:
                continue

            checked += 1
            calculated = team_score(league, team, game.team_players(game_team), game_team.adjustment)
            diff = game_team.score - calculated

            if abs(diff) > tolerance:
                discrepancies.append({
                    'time': game.time,
                    'team': league.team_name(team),
                    'stored_score': game_team.score,
                    'calculated_score': calculated,
                    'difference': diff,
                })

    return discrepancies, checked


def print_report(
    errors: List[str],
    warnings: List[str],
    discrepancies: List[dict],
    checked: int,
    verbose: bool = True,
):
    """Pretty print validation results with stats."""
    matched = checked - len(discrepancies)
    pct = (matched / checked * 100) if checked > 0 else 0

    print(f"\n  Checked {checked} team scores: {matched} matched ({pct:.1f}%)")

    if errors:
        print(f"\n  ✗ Errors ({len(errors)}):")
        for error in errors:
            print(f"    {error}")

    if warnings:
        print(f"\n  ⚠ Warnings ({len(warnings)}):")
        if verbose:
            for warning in warnings:
                print(f"    {warning}")

    if discrepancies:
        print(f"\n  ⚠ Score Mismatches ({len(discrepancies)}):")
        if verbose:
            print("  " + "-" * 70)
            print(f"  {'Game':<20} {'Team':<30} {'Stored':>7} {'Calc':>7} {'Diff':>7}")
            print("  " + "-" * 70)
            for d in discrepancies:
                print(
                    f"  {d['time']:%Y-%m-%d %H:%M}     {d['team'][:30]:<30} "
                    f"{d['stored_score']:>7} {d['calculated_score']:>7} {d['difference']:>+7}"
                )
        print()

    if not (errors or warnings or discrepancies):
        print("  ✓ League is consistent!")


def main():
    parser = argparse.ArgumentParser(description="Validate Torn league files")
    parser.add_argument(
        "leagues",
        nargs="+",
        help="League JSON files to validate",
    )
    parser.add_argument(
        "--tolerance", "-t",
        type=int,
        default=0,
        help="Allow score differences up to this amount",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Only show summary counts, not individual warnings and mismatches",
    )

    args = parser.parse_args()

    failed = False
    for path in args.leagues:
        print(f"Validating {path}")
        print("=" * 60)

        league = League()
        try:
            league.load(Path(path))
        except (FileNotFoundError, ValueError) as e:
            kind = 'Bad handicap' if isinstance(e, HandicapError) else 'Cannot read league'
            print(f"  ✗ {kind}: {e}")
            failed = True
            continue

        errors, warnings = validate_league(league)
        discrepancies, checked = rescore_league(league, args.tolerance)
        print_report(errors, warnings, discrepancies, checked, verbose=not args.summary)

        if errors:
            failed = True

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
