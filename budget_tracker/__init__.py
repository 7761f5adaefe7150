"""Console entry point for the budget ledger."""
