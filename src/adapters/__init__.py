"""Adapters that connect the core to reddit, SQLite and the console."""
