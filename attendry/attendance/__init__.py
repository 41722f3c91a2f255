"""Attendance state machine and gamification ledger."""
