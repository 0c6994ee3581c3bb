"""Exceptions du moteur de résonance."""


class ResonanceError(Exception):
    """Erreur de base du moteur."""


class InvalidInputError(ResonanceError, ValueError):
    """Entrée rejetée avant analyse (type, taille, mode inconnu)."""


class PersistenceError(ResonanceError):
    """Lecture ou écriture du stockage impossible."""


class ConfigurationError(ResonanceError):
    """Configuration ou patterns malformés."""
