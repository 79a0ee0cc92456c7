"""Mutable cron expression builder.

The builder owns the field state and gates every change through the validator.
Expanding to integer sets and compacting to range/step notation are delegated
to a converter, so the builder itself never parses step syntax.
"""
