"""Monthly muster roll (day-by-day attendance grid)."""
