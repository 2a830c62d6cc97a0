import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path to allow `import agents`, `import models`, etc.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def valid_payload() -> dict:
    """A wire-shaped request that passes validation."""
    return {
        "productName": "Veg Chowmein",
        "currentStockQty": 20,
        "popularityScore": 6,
        "spoilageRisk": "medium",
        "currentPrice": 180,
    }
