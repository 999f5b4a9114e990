"""Project templates shipped with tako."""
