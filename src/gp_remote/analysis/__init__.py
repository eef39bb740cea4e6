"""Cross-sectional and before/after analyses of the monthly series."""
