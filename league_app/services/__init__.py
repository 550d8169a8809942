"""Domain services of the league application (scoring ledger, statistics)."""
