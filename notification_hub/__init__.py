"""Realtime notification delivery and client state synchronisation engine."""
