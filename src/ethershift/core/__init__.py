"""Engine primitives: seeded RNG, shared type aliases and the continuation scheduler."""
