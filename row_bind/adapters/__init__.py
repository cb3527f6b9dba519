"""Database adapters - one per supported driver."""
