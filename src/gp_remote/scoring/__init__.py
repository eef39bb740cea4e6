"""Derived percentages and the per-region / national series built from them."""
