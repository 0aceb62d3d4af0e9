"""
Core domain models, integer math primitives, and invariants.

This module contains the foundational building blocks of the exchange
engine: error taxonomy, fixed-point power, bonding curve formulas,
pydantic state models and JSON Schema contracts. Nothing here depends on
ledgers, access control or the engine composition.
"""
