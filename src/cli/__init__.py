"""CLI `fcm-iid` (Typer + Rich)."""
