"""
WealthGrows - Source Package

A personal finance ledger: record income, expenses and transfers,
look at monthly and yearly aggregates, and ask an LLM analyst
for a plain-language review of a period.

DESIGN PRINCIPLES:
1. Past records never change retroactively
2. Fail early, fail visibly
3. No silent data loss (a corrupt store is an error, never "empty")
4. Statistics are pure folds, recomputed on every query
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "WealthGrows Team"
