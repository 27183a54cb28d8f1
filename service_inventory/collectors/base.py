"""
Classe de base pour tous les collecteurs de l'inventaire de services

Ce module définit l'interface commune que tous les collecteurs
doivent implémenter, ainsi que le suivi de durée.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Dict


class BaseCollector(ABC):
    """
    Classe de base abstraite pour tous les collecteurs

    Cette classe définit l'interface commune et mesure la durée d'une collecte.
    """

    def __init__(self, config, logger):
        """
        Initialise le collecteur de base

        Args:
            config: Instance de InventoryConfig
            logger: Instance de logging.Logger
        """
        self.config = config
        self.logger = logger

        # Métadonnées du collecteur
        self.collector_name = self.__class__.__name__
        self.collection_start_time = None
        self.last_collection_duration = 0.0

    @abstractmethod
    def collect(self, *args, **kwargs) -> Any:
        """
        Méthode principale de collecte - doit être implémentée par chaque collecteur

        Returns:
            Données collectées
        """

    def _start_collection(self):
        """
        Démarre une session de collecte

        Initialise les métriques et logs pour le suivi de performance.
        """
        self.collection_start_time = time.time()
        self.logger.debug(f"Début collecte {self.collector_name}")

    def _end_collection(self) -> float:
        """
        Termine une session de collecte

        Returns:
            float: Durée de collecte en secondes
        """
        if self.collection_start_time:
            duration = time.time() - self.collection_start_time
            self.logger.debug(f"Collecte {self.collector_name} terminée en {duration:.2f}s")
            return duration
        return 0.0

    def get_collection_stats(self) -> Dict[str, Any]:
        """
        Retourne les statistiques de la dernière collecte

        Returns:
            dict: Statistiques du collecteur
        """
        return {
            'collector_name': self.collector_name,
            'collection_duration': self.last_collection_duration
        }
