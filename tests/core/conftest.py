"""
Shared fixtures for decision tree core tests.
"""

import pytest

from decisiontree.core import DecisionNode, DecisionTree
from tests.core.helpers import CountingReward, RecordingPool, make_info


@pytest.fixture
def root() -> DecisionNode:
    return DecisionNode(action=0, payload=make_info())


@pytest.fixture
def reward() -> CountingReward:
    return CountingReward()


@pytest.fixture
def tree(reward: CountingReward) -> DecisionTree:
    return DecisionTree.from_payload(make_info(), reward)


@pytest.fixture
def pool() -> RecordingPool:
    return RecordingPool()
