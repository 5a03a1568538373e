"""Versolve command-line interface."""
