"""
rxcheck

Medication interaction checker: collects drug entries, resolves them against
public drug-identity APIs, and aggregates an interaction/risk report from
either a generative model or the NLM interaction database.
"""

__version__ = "1.0.0"
