"""
Module collecteur principal de l'inventaire de services

Ce module orchestre la collecte :
- Énumération des services auprès du gestionnaire
- Une tâche concurrente par service (résolution puis lecture du fichier unité)
- Assemblage des enregistrements dans l'ordre d'énumération
- Absorption des erreurs propres à chaque service
"""

import time
import socket
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

import psutil

from ..bus import create_bus_factory
from ..collectors.enumerator import UnitEnumerator
from ..collectors.resolver import UnitPathResolver
from ..collectors.unit_file import UnitFileParser
from .errors import ResolveQueryError
from .models import InventoryReport, UnitRecord


# Issue d'une tâche, pour les statistiques
RESOLVED = 'resolved'
NOT_FOUND = 'not_found'
FAILED = 'failed'


class ServiceInventoryCollector:
    """
    Collecteur principal qui orchestre l'inventaire des services

    Les tâches ne partagent aucun état : chacune ouvre sa propre connexion
    au gestionnaire et retourne un UnitRecord. Le seul point de
    synchronisation est l'attente de toutes les tâches.
    """

    def __init__(self, config, logger, bus_factory=None, enumerator=None,
                 resolver=None, parser=None):
        """
        Initialise le collecteur principal

        Args:
            config: Instance de InventoryConfig
            logger: Instance de InventoryLogger
            bus_factory: Fabrique de connexions (par défaut selon la configuration)
            enumerator: Énumérateur des services (optionnel)
            resolver: Résolveur des fichiers unité (optionnel)
            parser: Parseur des fichiers unité (optionnel)
        """
        self.config = config
        self.logger = logger.get_logger()

        manager_config = config.get_manager_config()
        collection_config = config.get_collection_config()
        self.max_workers = collection_config['max_workers']

        if bus_factory is None:
            bus_factory = create_bus_factory(
                manager_config['backend'],
                self.logger,
                timeout=manager_config['command_timeout']
            )
        self.bus_factory = bus_factory
        self.backend_name = getattr(bus_factory, 'backend_name', manager_config['backend'])

        self.enumerator = enumerator or UnitEnumerator(config, self.logger, bus_factory)
        self.resolver = resolver or UnitPathResolver(self.logger, bus_factory)
        self.parser = parser or UnitFileParser.from_config(config, self.logger)

        self._last_report: Optional[InventoryReport] = None
        self._last_stats: Dict[str, int] = {}

        self.logger.debug(f"ServiceInventoryCollector initialisé (backend: {self.backend_name})")

    def collect_all(self) -> InventoryReport:
        """
        Lance l'inventaire complet : énumération puis collecte par service

        Returns:
            InventoryReport: Rapport complet

        Raises:
            ManagerConnectionError, ManagerQueryError, UnitDecodeError:
                l'énumération a échoué, aucun rapport n'est produit
        """
        start_time = time.time()
        collection_timestamp = datetime.now().isoformat()
        self.logger.info("=== Début de l'inventaire des services ===")

        unit_names = self.enumerator.collect()
        records = self.collect(unit_names)

        collection_duration = time.time() - start_time

        report = InventoryReport(
            services=records,
            collection_timestamp=collection_timestamp,
            hostname=self._get_hostname(),
            boot_time=self._get_boot_time(),
            backend=self.backend_name,
            collection_duration_seconds=round(collection_duration, 2),
            stats=dict(self._last_stats)
        )
        self._last_report = report

        self.logger.info(f"Inventaire terminé en {collection_duration:.2f} secondes")
        self.logger.info(
            f"Services: {report.service_count} "
            f"(résolus: {self._last_stats.get(RESOLVED, 0)}, "
            f"sans fichier: {self._last_stats.get(NOT_FOUND, 0)}, "
            f"en échec: {self._last_stats.get(FAILED, 0)})"
        )
        return report

    def collect(self, unit_names: Iterable[str]) -> List[UnitRecord]:
        """
        Collecte un enregistrement par service, en parallèle

        Args:
            unit_names: Noms des services, dans l'ordre d'énumération

        Returns:
            list: Un UnitRecord par nom, dans le même ordre
        """
        names = list(unit_names)
        stats = {RESOLVED: 0, NOT_FOUND: 0, FAILED: 0}

        if not names:
            self._last_stats = stats
            return []

        # 0 = un worker par unité
        workers = len(names) if self.max_workers <= 0 else min(self.max_workers, len(names))
        self.logger.debug(f"Collecte de {len(names)} service(s) sur {workers} worker(s)")

        records = []
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='unit-collector') as executor:
            futures = [executor.submit(self._collect_unit, name) for name in names]

            # Attente dans l'ordre de soumission
            for name, future in zip(names, futures):
                try:
                    record, outcome = future.result()
                except Exception:
                    self.logger.exception(f"Erreur inattendue pour {name}, enregistrement minimal")
                    record, outcome = UnitRecord.not_found(name), FAILED

                stats[outcome] += 1
                records.append(record)

        self._last_stats = stats
        return records

    def _collect_unit(self, unit_name: str) -> Tuple[UnitRecord, str]:
        """
        Tâche d'un service : résolution puis lecture du fichier unité

        Args:
            unit_name: Nom de l'unité

        Returns:
            tuple: (UnitRecord, issue de la tâche)
        """
        try:
            resolution = self.resolver.resolve(unit_name)
        except ResolveQueryError as e:
            self.logger.warning(f"Résolution impossible: {e}")
            return UnitRecord.not_found(unit_name), FAILED

        if not resolution.found:
            return UnitRecord.not_found(unit_name), NOT_FOUND

        parsed = self.parser.parse(resolution.path)
        return UnitRecord.from_unit_file(unit_name, resolution.path, parsed), RESOLVED

    def _get_hostname(self) -> str:
        """Récupère le nom d'hôte de la machine"""
        try:
            return socket.gethostname()
        except OSError as e:
            self.logger.warning(f"Impossible de récupérer le hostname: {e}")
            return "Unknown"

    def _get_boot_time(self) -> Optional[str]:
        """Récupère l'heure de démarrage de l'hôte"""
        try:
            return datetime.fromtimestamp(psutil.boot_time()).isoformat()
        except (psutil.Error, OSError) as e:
            self.logger.debug(f"Heure de démarrage indisponible: {e}")
            return None

    def get_collection_stats(self) -> Dict[str, Any]:
        """
        Retourne les statistiques de la dernière collecte

        Returns:
            dict: Statistiques de collecte
        """
        if not self._last_report:
            return {'status': 'no_collection_yet'}

        return {
            'status': 'success',
            'last_collection_time': self._last_report.collection_timestamp,
            'collection_duration': self._last_report.collection_duration_seconds,
            'services_count': self._last_report.service_count,
            'outcomes': dict(self._last_stats),
            'enumerator': self.enumerator.get_collection_stats()
                if hasattr(self.enumerator, 'get_collection_stats') else {}
        }
