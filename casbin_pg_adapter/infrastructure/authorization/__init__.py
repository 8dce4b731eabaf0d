"""Authorization infrastructure package.

This package contains the casbin storage adapter:
- policy_adapter.py: PostgresPolicyAdapter implementing pycasbin's async
  adapter contract (plus batch and filtered loading)
"""
