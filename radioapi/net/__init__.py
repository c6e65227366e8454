"""Network helpers (HTTP transport and retry policy)."""
