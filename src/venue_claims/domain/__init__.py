"""Claim verification and ownership transfer domain."""
