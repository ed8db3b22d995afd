import logging

import pytest

from breedarchitect.breeding.pairing_table import PairingTable
from breedarchitect.elements.entity import Entity, Sex, Species, Trait
from breedarchitect.logger import bt_logger


def pytest_configure(config):
    """Set up test environment before tests run."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Keep the search logger silent; individual tests enable it explicitly
    bt_logger.disabled = True


@pytest.fixture
def abc_species():
    """A rank 0, B rank 10, C rank 20; tie orders follow the ranks."""
    return {
        "A": Species("A", 0, 0),
        "B": Species("B", 10, 1),
        "C": Species("C", 20, 2),
    }


@pytest.fixture
def abc_table(abc_species):
    return PairingTable(list(abc_species.values()))


@pytest.fixture
def traits():
    return {"x": Trait("x"), "y": Trait("y"), "z": Trait("z")}


@pytest.fixture
def two_step_pool(abc_species, traits):
    """Pool that needs two pairings to reach B carrying x and y."""
    A, C = abc_species["A"], abc_species["C"]
    return [
        Entity(A, Sex.MALE, frozenset({traits["x"]})),
        Entity(A, Sex.FEMALE, frozenset({traits["y"]})),
        Entity(C, Sex.MALE, frozenset()),
    ]
