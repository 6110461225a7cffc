"""
Tests for the random-walk baseline.
"""

import random

from ..search import Attempt, random_decide


def count_to(limit):
    """Integers as states; +1 and +2 as actions; the goal is reaching limit."""
    def actions_of(n):
        return [1, 2]

    def is_goal(start, n):
        return n == limit

    def apply(n, step):
        if n + step > limit:
            return Attempt.failure(n)
        return Attempt.success(n + step)

    return actions_of, is_goal, apply


class TestRandomDecide:
    """Tests for random_decide."""

    def test_reaches_goal_with_legal_actions(self):
        actions_of, is_goal, apply = count_to(10)

        found, actions = random_decide(0, actions_of, is_goal, apply, random.Random(1))

        assert found
        assert sum(actions) == 10
        assert all(a in (1, 2) for a in actions)

    def test_start_is_goal(self):
        actions_of, is_goal, apply = count_to(0)
        assert random_decide(0, actions_of, is_goal, apply) == (True, [])

    def test_seeded_walks_repeat(self):
        actions_of, is_goal, apply = count_to(20)

        first = random_decide(0, actions_of, is_goal, apply, random.Random(7))
        second = random_decide(0, actions_of, is_goal, apply, random.Random(7))

        assert first == second

    def test_dead_end_fails(self):
        """A state with no applicable action ends the walk unsuccessfully."""
        def actions_of(n):
            return [1]

        def apply(n, step):
            return Attempt.failure(n) if n >= 3 else Attempt.success(n + step)

        result = random_decide(0, actions_of, lambda s, n: n == 10, apply)

        assert result == (False, [])

    def test_gives_up_after_max_steps(self):
        """A walk that never reaches the goal stops at the step limit."""
        result = random_decide(
            0,
            lambda n: ["stay"],
            lambda s, n: False,
            lambda n, a: Attempt.success(n),
            max_steps=50,
        )

        assert result == (False, [])
