"""
Classe de base pour les accès au gestionnaire de services

Cette classe définit l'interface commune, en lecture seule, que chaque
backend (D-Bus, ligne de commande) doit implémenter.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Sequence


class BaseManagerBus(ABC):
    """
    Classe de base abstraite pour tous les backends du gestionnaire

    Une instance correspond à une connexion : elle est ouverte par
    connect() (ou en entrant dans un bloc with) et libérée par close().
    Les instances ne sont jamais partagées entre tâches.
    """

    backend_name = "base"

    def __init__(self, logger, timeout: float = 10.0):
        """
        Initialise le backend

        Args:
            logger: Instance de logging.Logger
            timeout: Délai maximal d'un appel au gestionnaire (secondes)
        """
        self.logger = logger
        self.timeout = timeout
        self.connected = False

    @abstractmethod
    def connect(self):
        """
        Ouvre la connexion au gestionnaire

        Raises:
            ManagerConnectionError: Gestionnaire injoignable
        """

    @abstractmethod
    def list_units(self) -> List[Sequence[Any]]:
        """
        Liste toutes les unités chargées

        Returns:
            list: Enregistrements bruts (tuples de 10 champs attendus)

        Raises:
            ManagerQueryError: Le gestionnaire a fait échouer l'appel
            UnitDecodeError: Réponse illisible
        """

    @abstractmethod
    def show_property(self, unit_name: str, property_name: str) -> str:
        """
        Interroge une propriété d'une unité

        Args:
            unit_name: Nom de l'unité
            property_name: Nom de la propriété (ex: FragmentPath)

        Returns:
            str: Réponse texte au format "Propriété=valeur", vide si l'unité est inconnue

        Raises:
            ResolveQueryError: Requête impossible à exécuter
        """

    def close(self):
        """Libère la connexion"""
        self.connected = False

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False
