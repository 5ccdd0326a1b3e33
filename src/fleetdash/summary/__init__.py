"""Summary statistics derived from one orchestration cycle."""
