"""Governance package.

This package contains the rule-based audit applied by orchestration to every
capability response (`auditor`) and the standalone text heuristics it builds on
(`heuristics`). Nothing here calls a model.
"""
