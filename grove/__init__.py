"""Manage git worktrees: branch resolution, seeding and after-checkout hooks."""

__version__ = "0.1.0"