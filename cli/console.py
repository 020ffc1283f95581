"""Console output for rebuzzle CLI."""

from cli.api_client import RebuzzleAPIClient


class ConsoleUI:
    """Prints server responses for the command line."""

    def __init__(self, client: RebuzzleAPIClient):
        self.client = client

    def print_verdict(self, guess: str, answer: str, verdict: dict):
        """Print a validation verdict."""
        print('-' * 40)
        print(f'Your guess: {guess}')
        print(f'Answer: {answer}')
        print(f"Result: {'CORRECT' if verdict['is_correct'] else 'WRONG'}")
        print(f"Confidence: {verdict['confidence']:.2f} (decided by {verdict['method']})")
        if verdict.get('reasoning'):
            print(f"Reason: {verdict['reasoning']}")
        for suggestion in verdict.get('suggestions') or []:
            print(f'  - {suggestion}')
        print('-' * 40)

    def print_score(self, breakdown: dict):
        """Print a score breakdown."""
        print('\n' + '=' * 40)
        print('SCORE')
        print('=' * 40)
        print(f"Base score:        {breakdown['base_score']:>5}")
        print(f"Speed bonus:       {breakdown['speed_bonus']:>+5}")
        print(f"Accuracy penalty:  {-breakdown['accuracy_penalty']:>+5}")
        print(f"Hint penalty:      {-breakdown['hint_penalty']:>+5}")
        print(f"Streak bonus:      {breakdown['streak_bonus']:>+5}")
        print(f"Difficulty bonus:  {breakdown['difficulty_bonus']:>+5}")
        print('-' * 40)
        print(f"Total:             {breakdown['total_score']:>5}")

    def print_achievements(self, result: dict):
        """Print achievements grouped by category."""
        categories = result['categories']
        current = None
        for achievement in result['achievements']:
            if achievement['category'] != current:
                current = achievement['category']
                print(f"\n{categories[current]['name'].upper()}")
            print(f"  [{achievement['rarity']:<9}] {achievement['name']:<25} "
                  f"{achievement['points']:>5} pts  {achievement['description']}")
        print(f"\nTotal: {result['total']} achievements")

    def check(self, guess: str, answer: str, attempts_left: int | None = None, use_ai: bool = True):
        verdict = self.client.validate(guess, answer, use_ai=use_ai)
        self.print_verdict(guess, answer, verdict)
        if not verdict['is_correct'] and attempts_left is not None:
            feedback = self.client.get_feedback(guess, answer, attempts_left)
            print(feedback['feedback'])
