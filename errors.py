"""Exceptions du service d'ingestion des formulaires.

Chaque couche lève une erreur précise ; seule l'API (main.py) les traduit
en codes HTTP.
"""


class IngestError(Exception):
    """Erreur de base pour toute ingestion de formulaire."""


class ConfigError(Exception):
    """Configuration invalide (variables d'environnement, dialecte SQL)."""


class DuplicateSubmissionError(IngestError):
    """Le response_id est déjà enregistré dans form_submissions."""

    def __init__(self, response_id: str):
        super().__init__(f"Soumission déjà enregistrée: {response_id}")
        self.response_id = response_id


class SubmissionValidationError(IngestError):
    """Une entité référencée (CSA, bâtiment) n'existe pas."""


class ConstraintViolationError(IngestError):
    """Échec SQL pendant la transaction ; la soumission est passée en 'error'."""

    def __init__(self, response_id: str, message: str):
        super().__init__(f"Échec du traitement de {response_id}: {message}")
        self.response_id = response_id
        self.message = message


class SubmissionNotFoundError(IngestError):
    """Aucune ligne form_submissions pour ce response_id."""


class LedgerTransitionError(IngestError):
    """Transition de statut interdite (la ligne n'est plus 'pending')."""
