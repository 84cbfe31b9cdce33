"""Prompting package.

This package contains deterministic prompt-construction helpers used by the intent
router and the orchestration engine. It does not perform routing, model
invocation, or response parsing.
"""
