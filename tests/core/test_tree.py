"""
Tests for DecisionTree single-path operations.

Tests cover:
- Lookup delegation to the root
- get_or_create reward computation and memoization
- reward_of faults
- Backfilling rewards for nodes created without one
- Failure handling of the reward function
"""

import pytest

from decisiontree.core import (
    DecisionNode,
    DecisionTree,
    PathNotFound,
    PayloadSchemaMismatch,
    RewardNotComputed,
)
from tests.core.helpers import CountingReward, make_info, make_other_info, spread


class TestConstruction:
    """Tests for creating trees."""

    def test_from_payload(self, tree):
        assert tree.root.action == 0
        assert tree.reward_count == 0
        assert tree.rewards == ()
        assert len(tree) == 1

    def test_wraps_existing_root(self, root):
        root.get_or_create_path([1, 2], make_info)
        tree = DecisionTree(root, spread)

        assert tree.contains([1, 2])
        assert tree.resolve([1]) is root.child(1)

    def test_root_with_reward_slots_rejected(self):
        """A root whose subtree already points into some rewards table is refused."""
        root = DecisionNode(action=0, payload=make_info())
        root.add_action(1, make_info(), reward_index=1)

        with pytest.raises(ValueError, match="reward slots"):
            DecisionTree(root, spread)


class TestGetOrCreate:
    """Tests for single-path get_or_create."""

    def test_insert_computes_reward(self, tree, reward):
        value = tree.get_or_create([1, 5, 2], make_info)

        assert value == spread([1, 5, 2])
        assert reward.calls == [(1, 5, 2)]
        assert tree.rewards == (value,)
        assert tree.resolve([1, 5, 2]).reward_index == 1

    def test_repeat_insert_uses_cache(self, tree, reward):
        first = tree.get_or_create([1], make_info)
        second = tree.get_or_create([1], make_info)

        assert first == second
        assert tree.reward_count == 1
        assert reward.calls == [(1,)]

    def test_existing_path_does_not_call_factory(self, tree):
        tree.get_or_create([1], make_info)

        def factory():
            raise AssertionError("factory should not be called")

        tree.get_or_create([1], factory)

    def test_intermediate_nodes_have_no_reward(self, tree):
        tree.get_or_create([1, 2, 3], make_info)

        assert tree.resolve([1]).reward_index == 0
        assert tree.resolve([1, 2]).reward_index == 0
        assert tree.resolve([1, 2, 3]).reward_index == 1

    def test_slots_follow_table_length(self, tree):
        tree.get_or_create([1], make_info)
        tree.get_or_create([2], make_info)
        tree.get_or_create([1, 2], make_info)

        assert [tree.resolve(p).reward_index for p in ([1], [2], [1, 2])] == [1, 2, 3]

    def test_reward_fn_receives_tuple(self, tree, reward):
        tree.get_or_create([3, 4], make_info)
        assert isinstance(reward.calls[0], tuple)

    def test_schema_mismatch_creates_nothing(self, tree, reward):
        with pytest.raises(PayloadSchemaMismatch):
            tree.get_or_create([1, 2], make_other_info)

        assert not tree.contains([1])
        assert tree.reward_count == 0
        assert reward.calls == []

    def test_backfills_intermediate_node(self, tree, reward):
        """An intermediate node gets its own reward the first time it is requested."""
        tree.get_or_create([1, 2, 3], make_info)

        def factory():
            raise AssertionError("no node is created, so no payload is needed")

        value = tree.get_or_create([1, 2], factory)

        assert value == spread([1, 2])
        assert tree.resolve([1, 2]).reward_index == 2
        assert reward.calls == [(1, 2, 3), (1, 2)]
        assert len(tree) == 4

    def test_root_reward(self, tree, reward):
        """The empty path addresses the root, which can get a reward too."""
        value = tree.get_or_create([], make_info)

        assert value == 0
        assert tree.root.reward_index == 1
        assert reward.calls == [()]


class TestRewardOf:
    """Tests for reward_of."""

    def test_returns_cached_reward(self, tree):
        value = tree.get_or_create([4, 1], make_info)
        assert tree.reward_of([4, 1]) == value

    def test_missing_path(self, tree):
        with pytest.raises(PathNotFound) as exc_info:
            tree.reward_of([9])

        assert exc_info.value.path == (9,)
        assert "[9]" in str(exc_info.value)

    def test_missing_path_is_key_error(self, tree):
        with pytest.raises(KeyError):
            tree.reward_of([9])

    def test_node_without_reward(self, tree):
        tree.root.get_or_create_path([1, 2], make_info)

        with pytest.raises(RewardNotComputed) as exc_info:
            tree.reward_of([1, 2])
        assert exc_info.value.reward_index == 0

    def test_root_without_reward(self, tree):
        with pytest.raises(RewardNotComputed, match="root"):
            tree.reward_of([])

    def test_bool_action_is_not_an_alias(self, tree):
        """[True] does not read the reward stored under [1]."""
        tree.get_or_create([1], make_info)

        with pytest.raises(TypeError):
            tree.reward_of([True])
        with pytest.raises(TypeError):
            tree.contains([True])


class TestFailures:
    """Tests for failures raised by the reward function."""

    def test_failed_reward_leaves_no_slot(self, root):
        def explode(path):
            raise RuntimeError("boom")

        tree = DecisionTree(root, explode)

        with pytest.raises(RuntimeError, match="boom"):
            tree.get_or_create([1, 2], make_info)

        assert tree.contains([1, 2])
        assert tree.resolve([1, 2]).reward_index == 0
        assert tree.reward_count == 0

    def test_failed_path_is_retried_on_next_request(self, root):
        attempts = []

        def flaky(path):
            attempts.append(path)
            if len(attempts) == 1:
                raise RuntimeError("first call fails")
            return len(path)

        tree = DecisionTree(root, flaky)
        with pytest.raises(RuntimeError):
            tree.get_or_create([1, 2], make_info)

        assert tree.get_or_create([1, 2], make_info) == 2
        assert tree.resolve([1, 2]).reward_index == 1

    def test_interrupt_releases_slot(self, root):
        """A KeyboardInterrupt inside the reward function still releases the slot."""

        def interrupted(path):
            raise KeyboardInterrupt

        tree = DecisionTree(root, interrupted)
        with pytest.raises(KeyboardInterrupt):
            tree.get_or_create([5, 1], make_info)

        assert tree.resolve([5, 1]).reward_index == 0

        tree.reward_fn = spread
        assert tree.get_or_create([9], make_info) == spread([9])
        assert tree.resolve([9]).reward_index == 1
        with pytest.raises(RewardNotComputed):
            tree.reward_of([5, 1])


class TestIntrospection:
    """Tests for items / len / repr."""

    def test_items_lists_rewarded_paths(self, tree):
        tree.get_or_create([1, 2], make_info)
        tree.get_or_create([3], make_info)

        assert list(tree.items()) == [((1, 2), spread([1, 2])), ((3,), spread([3]))]

    def test_repr(self, tree):
        tree.get_or_create([1], make_info)
        assert repr(tree) == "DecisionTree(nodes=2, rewards=1)"


def test_scenario_single_inserts():
    """Insert [1] twice then [1, 2]."""
    reward = CountingReward()
    tree = DecisionTree.from_payload(make_info(), reward)

    first = tree.get_or_create([1], make_info)
    assert tree.reward_count == 1

    assert tree.get_or_create([1], make_info) == first
    assert tree.reward_count == 1

    tree.get_or_create([1, 2], make_info)
    assert tree.reward_count == 2
    assert tree.contains([1])
    assert tree.contains([1, 2])
    assert not tree.contains([1, 3])
