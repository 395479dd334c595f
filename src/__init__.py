"""
Kameti Ledger - Source Package

A treasurer's ledger for a kameti or small committee: members, income and
expense entries, an audit trail of every change, and a short AI summary of
the committee's finances.

DESIGN PRINCIPLES:
1. The store is the only writer; every change is audited
2. Figures are derived, never stored
3. The AI summary is cosmetic and never blocks the ledger
4. Preference storage is swappable
"""

__version__ = "1.0.0"
__author__ = "Kameti Ledger Team"
