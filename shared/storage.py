"""
Stockage des fichiers (documents, exports BPF)

Le FileStore enveloppe un backend de stockage Django. Les échecs d'écriture
remontent en StorageError, les échecs de suppression sont journalisés et ignorés.
"""
import logging

from django.conf import settings
from django.core.files.base import ContentFile, File
from django.core.files.storage import default_storage
from django.utils.module_loading import import_string

from .exceptions import StorageError

logger = logging.getLogger(__name__)


def is_external_reference(reference):
    return bool(reference) and reference.startswith(('http://', 'https://'))


class FileStore:
    """Stockage de fichiers adossé au stockage Django"""

    def __init__(self, storage=None):
        self.storage = storage or default_storage

    def store(self, content, path_hint):
        """
        Enregistre un contenu (bytes ou fichier) et retourne la référence durable
        """
        if isinstance(content, (bytes, bytearray)):
            content = ContentFile(bytes(content))
        elif not isinstance(content, File):
            content = File(content)
        try:
            reference = self.storage.save(path_hint, content)
        except Exception as e:
            logger.error(f"Erreur lors de l'enregistrement du fichier {path_hint}: {e}", exc_info=True)
            raise StorageError(f"Impossible d'enregistrer le fichier {path_hint}") from e
        logger.info(f"Fichier enregistré: {reference}")
        return reference

    def delete(self, reference):
        """
        Supprime un fichier. Retourne False en cas d'échec, sans lever.
        """
        if not reference or is_external_reference(reference):
            return False
        try:
            self.storage.delete(reference)
        except Exception as e:
            logger.warning(f"Suppression du fichier {reference} impossible: {e}")
            return False
        logger.info(f"Fichier supprimé: {reference}")
        return True

    def url(self, reference):
        if is_external_reference(reference):
            return reference
        return self.storage.url(reference)


def get_file_store():
    """Instancie le stockage configuré dans settings.QUALITE['FILE_STORE']"""
    path = getattr(settings, 'QUALITE', {}).get('FILE_STORE', 'shared.storage.FileStore')
    return import_string(path)()
