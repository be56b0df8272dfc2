"""HTTP service for self-study problem sets built on ``mathgrade``."""
