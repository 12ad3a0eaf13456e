"""Utilities: clock and invariant guards."""
