"""Token issuance for the expense API."""
