"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the rebasing ledger system.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. test_conservation.py - Supply accounting through mints, transfers and corporate actions
2. test_atomicity.py - Rejected operations leave both ledgers unchanged
3. test_conversion_bounds.py - Rounding direction of wrap/unwrap/claim and rate positivity

These tests use hypothesis for property-based testing.
"""
