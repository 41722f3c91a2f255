"""Attendry — QR attendance, gamification, payroll and muster engine."""
