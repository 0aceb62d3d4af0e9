"""
Test suite for the continuous token exchange

Contains:
- tests/unit/          : Unit tests for individual modules
- tests/scenarios/     : Scenario tests (sandwich defense, escrow reentrancy, etc.)
"""
