"""Recurrence engine: scalar recurrences, escape test and variant dispatch."""
