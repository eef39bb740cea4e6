"""Entry points: pre-ingestion scouting and the full composition run."""
