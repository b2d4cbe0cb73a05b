from .classifier import ChangeClassifier, classify


__all__ = [
    "ChangeClassifier",
    "classify",
]
