"""
Exceptions métier du moteur qualité

Chaque exception porte un code stable et un statut HTTP, traduits en réponse
JSON par ``shared.exception_handler.custom_exception_handler``.
"""


class QualiteError(Exception):
    """Erreur métier de base"""
    code = 'INTERNAL_ERROR'
    status_code = 500
    default_message = 'Une erreur interne est survenue'

    def __init__(self, message=None, details=None, code=None):
        self.message = message or self.default_message
        self.details = details
        if code:
            self.code = code
        super().__init__(self.message)

    def as_dict(self):
        payload = {'code': self.code, 'message': self.message}
        if self.details:
            payload['details'] = self.details
        return payload


class ValidationError(QualiteError):
    """Champs manquants ou invalides dans la requête"""
    code = 'INVALID_INPUT'
    status_code = 400
    default_message = 'Données invalides'


class NotFound(QualiteError):
    """Entité introuvable dans l'organisation de l'appelant"""
    code = 'NOT_FOUND'
    status_code = 404
    default_message = 'Ressource introuvable'


class Conflict(QualiteError):
    """Doublon sur une clé unique"""
    code = 'CONFLICT'
    status_code = 409
    default_message = 'Cette ressource existe déjà'


class InvalidOperation(QualiteError):
    """Transition d'état refusée"""
    code = 'INVALID_OPERATION'
    status_code = 400
    default_message = 'Opération non autorisée dans cet état'

    def __init__(self, message=None, details=None, code=None, status_code=None):
        super().__init__(message, details, code)
        if status_code:
            self.status_code = status_code


class Expired(QualiteError):
    """Invitation expirée"""
    code = 'EXPIRED'
    status_code = 410
    default_message = 'Cette invitation a expiré'


class StorageError(QualiteError):
    """Échec d'écriture dans le stockage de fichiers"""
    code = 'STORAGE_ERROR'
    status_code = 502
    default_message = "Erreur lors de l'enregistrement du fichier"


def validate_payload(serializer_class, data, partial=False, **kwargs):
    """
    Valide ``data`` avec un serializer DRF et retourne les données validées.
    Les erreurs de champ sont remontées en ValidationError avec le détail.
    """
    serializer = serializer_class(data=data, partial=partial, **kwargs)
    if not serializer.is_valid():
        raise ValidationError(details=serializer.errors)
    return serializer.validated_data
