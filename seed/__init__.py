"""
seed - Advocate Seed Data Package

- advocates: Fixed dataset used by POST /api/seed
- generator: Synthetic dataset generator used by POST /api/seed-large
"""

from seed.advocates import ADVOCATE_DATA
from seed.generator import generate_advocates, seed_large_dataset

__all__ = [
    "ADVOCATE_DATA",
    "generate_advocates",
    "seed_large_dataset",
]
