"""Record validation rules."""
