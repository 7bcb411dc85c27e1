"""Domain records and API resource shapes."""
