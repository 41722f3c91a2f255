"""Monthly payroll computation."""
