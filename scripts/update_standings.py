"""Team ELO Standings CLI.

Usage:
    python -m scripts.update_standings -m matches.json -s standings.json -o output.json
    python -m scripts.update_standings -m matches.json -s standings.json -o output.json -c config.yaml
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

# Setup
load_dotenv(os.path.join(os.path.dirname(__file__), '..', '.env'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.engine.elo_batch import EloBatch
from src.engine.elo_config import default_config_path
from src.engine.errors import ComputationError, ConfigError, MatchParseError
from src.pipeline.standings_pipeline import run_standings_pipeline

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Calculates evolution of team elo after match sets')
    parser.add_argument('-c', '--config', metavar='FILE', default=None,
                        help=f'Path to config file (default: {default_config_path()})')
    parser.add_argument('-s', '--standings', metavar='FILE', required=True,
                        help='Path to standings file')
    parser.add_argument('-m', '--matches', metavar='FILE', required=True,
                        help='Path to matches file')
    parser.add_argument('-o', '--output', metavar='FILE', required=True,
                        help='Path to output standings')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log every match update')
    return parser.parse_args(argv)


def print_summary(batch: EloBatch, top: int = 10):
    """결과 요약."""
    print("\n" + "=" * 60)
    print("TEAM ELO STANDINGS SUMMARY")
    print("=" * 60)

    print(f"\nTeams: {len(batch.ratings):,}")
    print(f"Matches: {len(batch.match_details):,}")
    if batch.new_teams:
        print(f"New teams (default rating): {', '.join(batch.new_teams)}")

    ranked = sorted(batch.ratings.values(), key=lambda t: -t.rating)[:top]
    if ranked:
        print(f"\nTop {len(ranked)} Teams:")
        for i, t in enumerate(ranked, 1):
            print(f"  {i:>2}. {t.team}: {t.rating:.1f} ({t.matches_played} matches)")

    # 이번 실행 변동폭
    net: dict[str, float] = {}
    for d in batch.match_details:
        net[d.winner] = net.get(d.winner, 0.0) + d.winner_delta
        net[d.loser] = net.get(d.loser, 0.0) + d.loser_delta
    movers = sorted(net.items(), key=lambda x: -abs(x[1]))[:top]
    if movers:
        print("\nBiggest Movers:")
        for team, delta in movers:
            print(f"  {team}: {delta:+.1f}")


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(message)s', datefmt='%H:%M:%S')

    try:
        result = run_standings_pipeline(
            matches_path=args.matches,
            standings_path=args.standings,
            output_path=args.output,
            config_path=args.config,
        )
    except (OSError, ConfigError, MatchParseError, ComputationError) as e:
        logger.error(f"Standings update failed: {e}")
        return 1

    print_summary(result['batch'])
    print(f"\nWrote {result['team_count']} teams to {result['output']}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
