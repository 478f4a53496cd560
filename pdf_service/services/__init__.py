"""Service layer: target policy, option normalization, render queue and renderer."""
