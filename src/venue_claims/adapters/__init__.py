"""Adapters binding the claim workflow ports to concrete infrastructure."""
