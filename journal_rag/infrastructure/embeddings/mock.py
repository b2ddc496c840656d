import hashlib
from typing import Optional

import numpy as np

from journal_rag.core.models.provider import EmbeddingResult

MOCK_MODEL = "mock-embedding"

_LCG_MULTIPLIER = 1103515245
_LCG_INCREMENT = 12345
_MASK_64 = (1 << 64) - 1


def generate_mock_embedding(text: str, dimension: int = 768) -> np.ndarray:
    """Deterministic pseudo-embedding for offline use and tests.

    A 64-bit linear congruential generator is seeded from a SHA-256 digest of
    the text; values in [-1, 1] are scaled by 0.1 and L2-normalized.
    """
    seed = int.from_bytes(hashlib.sha256(text.encode("utf-8")).digest()[:8], "little")

    values = np.empty(dimension, dtype=np.float64)
    for i in range(dimension):
        seed = (seed * _LCG_MULTIPLIER + _LCG_INCREMENT) & _MASK_64
        values[i] = seed / _MASK_64 * 2.0 - 1.0

    vector = values * 0.1
    magnitude = np.linalg.norm(vector)
    if magnitude > 0:
        vector = vector / magnitude
    return vector.astype(np.float32)


class MockEmbedder:
    name = "mock"

    def __init__(self, dimension: int = 768):
        self._dimension = dimension

    async def embed(self, text: str, model: Optional[str] = None) -> EmbeddingResult:
        return EmbeddingResult(
            vector=generate_mock_embedding(text, self._dimension), model=MOCK_MODEL
        )
