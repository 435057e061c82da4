"""
Tests for the decision tree core.

- test_payload.py: payload schemas and compatibility checks
- test_node.py: DecisionNode lookup, insertion and traversal
- test_tree.py: single-path insertion and reward lookup
- test_batch.py: batched insertion and reward dispatch
- test_pool.py: serial and executor pools
- test_properties.py: invariants over random insertion sequences
"""
