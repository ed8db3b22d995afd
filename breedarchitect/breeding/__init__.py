from breedarchitect.breeding.pairing_table import PairingTable
from breedarchitect.breeding.calculator import BreedCalculator

__all__ = ["PairingTable", "BreedCalculator"]
