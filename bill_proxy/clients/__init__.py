"""Clients for upstream services."""
