"""
Exceptions métier - converties en réponses HTTP par les handlers de main.py
"""


class ProcurementError(Exception):
    """Erreur métier de base : porte un message, un code et un statut HTTP"""

    error_code = "PROCUREMENT_ERROR"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResourceNotFoundError(ProcurementError):
    """Entité absente (identifiant inconnu ou référence introuvable)"""

    error_code = "RESOURCE_NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, identifier=None, message: str | None = None):
        self.resource = resource
        self.identifier = identifier
        if message is None:
            message = f"{resource} introuvable (id={identifier})"
        super().__init__(message)


class BusinessValidationError(ProcurementError):
    """Règle métier violée (champ obligatoire, montant négatif, dates incohérentes...)"""

    error_code = "BUSINESS_VALIDATION"
    status_code = 400


class DuplicateResourceError(BusinessValidationError):
    """Clé unique déjà utilisée"""

    error_code = "DUPLICATE_RESOURCE"
    status_code = 409


class DependencyConflictError(BusinessValidationError):
    """Suppression refusée : des enregistrements dépendants existent"""

    error_code = "DEPENDENCY_CONFLICT"
    status_code = 409


class MissingFieldError(BusinessValidationError):
    """Champ obligatoire absent ou vide"""

    def __init__(self, field: str, operation: str = "la création"):
        self.field = field
        super().__init__(f"Le champ '{field}' est obligatoire pour {operation}")
