"""Forecast engine: pure functions over monthly income/expense series."""
