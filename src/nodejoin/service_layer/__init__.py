"""Service layer: the enrollment decision engine."""
