"""Club ledger backend package."""
