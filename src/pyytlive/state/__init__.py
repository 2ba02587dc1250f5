"""Broadcast state cache and polling core."""
