"""HTTP interface for the budget ledger."""
