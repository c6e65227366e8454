"""Request building, error classification and JSON accessors."""
