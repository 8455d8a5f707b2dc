"""Inventory ledger service for a retail back office."""
