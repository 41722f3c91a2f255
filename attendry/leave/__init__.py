"""Leave requests and monthly leave aggregation."""
