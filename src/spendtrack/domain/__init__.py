"""Domain layer for spendtrack application."""
