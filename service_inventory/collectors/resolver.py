"""
Résolution du fichier unité (FragmentPath) d'un service

Chaque résolution ouvre sa propre connexion au gestionnaire : rien n'est
partagé avec l'énumération ni entre tâches.
"""

from typing import Callable, Optional

from ..bus.base import BaseManagerBus
from ..core.constants import FRAGMENT_PATH_PROPERTY
from ..core.errors import InventoryError, ResolveQueryError
from ..core.models import PathResolution


def parse_property_output(output: str, property_name: str) -> Optional[str]:
    """
    Extrait la valeur d'une propriété d'une sortie "Clé=valeur"

    Args:
        output: Réponse texte du gestionnaire
        property_name: Clé recherchée

    Returns:
        str: Valeur sans fin de ligne, None si absente ou vide
    """
    if not output:
        return None

    for line in output.splitlines():
        key, sep, value = line.partition('=')
        if sep and key.strip() == property_name:
            value = value.rstrip('\r\n')
            return value or None

    return None


class UnitPathResolver:
    """
    Résout le chemin du fichier unité d'un service auprès du gestionnaire
    """

    def __init__(self, logger, bus_factory: Callable[[], BaseManagerBus],
                 property_name: str = FRAGMENT_PATH_PROPERTY):
        """
        Args:
            logger: Instance de logging.Logger
            bus_factory: Fabrique de connexions au gestionnaire
            property_name: Propriété donnant le chemin du fichier unité
        """
        self.logger = logger
        self.bus_factory = bus_factory
        self.property_name = property_name

    def resolve(self, unit_name: str) -> PathResolution:
        """
        Interroge le gestionnaire pour le fichier unité d'un service

        Args:
            unit_name: Nom de l'unité

        Returns:
            PathResolution: found=False si la propriété est absente ou vide

        Raises:
            ResolveQueryError: Requête impossible (connexion, processus, timeout)
        """
        try:
            with self.bus_factory() as bus:
                output = bus.show_property(unit_name, self.property_name)
        except ResolveQueryError:
            raise
        except InventoryError as e:
            raise ResolveQueryError(unit_name, str(e)) from e

        path = parse_property_output(output, self.property_name)
        if path is None:
            self.logger.debug(f"{unit_name}: aucune propriété {self.property_name}")
            return PathResolution.not_found()

        return PathResolution(path=path, found=True)
