import pytest

from fake_backend import FakeBackend
from fluidstate.engine.fluid import Fluid


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def fluid(backend):
    return Fluid(backend)
