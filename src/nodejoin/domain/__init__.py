"""Domain layer: the enrollment token, its invariants and its codec."""
