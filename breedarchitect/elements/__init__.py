from breedarchitect.elements.entity import Entity, Sex, Species, Trait

__all__ = ["Entity", "Sex", "Species", "Trait"]
