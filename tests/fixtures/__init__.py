"""Shared test data for crossshell tests."""
