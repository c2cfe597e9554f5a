import pytest

from triwarp.models.triangle import Triangle
from triwarp.models.warp_options import WarpOptions
from triwarp.services.triangle_mapping_service import TriangleMappingService

from .helpers import gradient_buffer


@pytest.fixture(autouse=True)
def _clean_warp_env(monkeypatch):
    # A developer .env must not leak into the defaults under test.
    for name in ("WARP_BACKGROUND", "WARP_SAMPLING", "WARP_WORKERS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def gradient_10():
    return gradient_buffer(10, 10)


@pytest.fixture
def lower_left_10():
    return Triangle.from_coords([(0, 0), (0, 10), (10, 10)])


@pytest.fixture
def mapper():
    return TriangleMappingService(WarpOptions())
