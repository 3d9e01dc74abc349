"""Maintenance utilities."""
