"""Readers for the raw appointment extracts, IMD index and LSOA lookup."""
