"""Pure rental rules: the lifecycle table, pricing and events."""
