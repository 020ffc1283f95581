"""Entry point for rebuzzle CLI client."""

import argparse
import sys

import requests

from cli.api_client import RebuzzleAPIClient
from cli.console import ConsoleUI


def main():
    parser = argparse.ArgumentParser(description='Rebuzzle - rebus answer checking and scoring')
    parser.add_argument(
        '--server',
        default='http://localhost:8000',
        help='Server URL (default: http://localhost:8000)'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    check = subparsers.add_parser('check', help='Check a guess against the answer')
    check.add_argument('guess')
    check.add_argument('answer')
    check.add_argument('--attempts-left', type=int, help='Show feedback for a wrong guess')
    check.add_argument('--no-ai', action='store_true', help='Skip the semantic judge (ignored when the server sets always_use_ai)')

    score = subparsers.add_parser('score', help='Score a solved puzzle')
    score.add_argument('time', type=float, help='Seconds taken to solve')
    score.add_argument('--wrong', type=int, default=0, help='Wrong attempts before solving')
    score.add_argument('--streak', type=int, default=0, help='Current streak in days')
    score.add_argument('--difficulty', type=int, default=5, help='Puzzle difficulty level')
    score.add_argument('--hints', type=int, default=0, help='Hints used')

    achievements = subparsers.add_parser('achievements', help='List achievements')
    achievements.add_argument('--category')
    achievements.add_argument('--rarity')

    args = parser.parse_args()

    client = RebuzzleAPIClient(base_url=args.server)
    ui = ConsoleUI(client)

    try:
        if args.command == 'check':
            ui.check(args.guess, args.answer, attempts_left=args.attempts_left, use_ai=not args.no_ai)
        elif args.command == 'score':
            ui.print_score(client.score(args.time, args.wrong, args.streak, args.difficulty, args.hints))
        elif args.command == 'achievements':
            ui.print_achievements(client.list_achievements(args.category, args.rarity))
    except requests.RequestException as e:
        print(f'Error talking to {args.server}: {e}', file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print('\nGoodbye!')
        sys.exit(0)


if __name__ == '__main__':
    main()
