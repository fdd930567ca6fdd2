"""Adapters binding the reconciliation engine to concrete stores."""
