"""Supplier reconciliation guardrails around a generative-model diagnosis."""

__version__ = "1.0.0"
