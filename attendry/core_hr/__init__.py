"""Core HR module — employees and the points leaderboard."""
