"""File boundary and report serialization for dfalab."""
