"""Pure business logic."""
