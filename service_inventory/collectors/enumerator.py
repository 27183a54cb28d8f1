"""
Énumération des services systemd

Un seul appel ListUnits sur une connexion dédiée, refermée avant le retour.
Les enregistrements sont validés puis filtrés sur le suffixe de service,
dans l'ordre renvoyé par le gestionnaire.
"""

from typing import Any, Callable, List, Sequence

from .base import BaseCollector
from ..bus.base import BaseManagerBus
from ..core.constants import LIST_UNITS_RECORD_ARITY, SERVICE_SUFFIX
from ..core.errors import UnitDecodeError


class UnitEnumerator(BaseCollector):
    """
    Collecteur de la liste des unités de service
    """

    def __init__(self, config, logger, bus_factory: Callable[[], BaseManagerBus]):
        """
        Args:
            config: Instance de InventoryConfig (None accepté: valeurs par défaut)
            logger: Instance de logging.Logger
            bus_factory: Fabrique de connexions au gestionnaire
        """
        super().__init__(config, logger)
        self.bus_factory = bus_factory
        if config is not None:
            self.service_suffix = config.get_collection_config()['service_suffix']
        else:
            self.service_suffix = SERVICE_SUFFIX

    def collect(self) -> List[str]:
        """
        Énumère les unités de service

        Returns:
            list: Noms des unités de service, ordre du gestionnaire

        Raises:
            ManagerConnectionError: Connexion impossible
            ManagerQueryError: Appel ListUnits en échec
            UnitDecodeError: Enregistrement mal formé
        """
        self._start_collection()

        with self.bus_factory() as bus:
            records = bus.list_units()

        service_names = self._filter_services(records)

        self.last_collection_duration = self._end_collection()
        self.logger.info(f"{len(service_names)} service(s) énuméré(s) sur {len(records)} unité(s)")
        return service_names

    def enumerate(self) -> List[str]:
        """Alias de collect()"""
        return self.collect()

    def _filter_services(self, records: Sequence[Any]) -> List[str]:
        if isinstance(records, (str, bytes)) or not isinstance(records, Sequence):
            raise UnitDecodeError(f"Liste d'unités attendue, reçu {type(records).__name__}")

        service_names = []
        for index, record in enumerate(records):
            name = self._decode_record(index, record)
            if name.endswith(self.service_suffix):
                service_names.append(name)

        return service_names

    def _decode_record(self, index: int, record: Any) -> str:
        """
        Valide un enregistrement ListUnits et retourne le nom de l'unité

        Raises:
            UnitDecodeError: Arité ou type de nom inattendu
        """
        if isinstance(record, (str, bytes)) or not isinstance(record, Sequence):
            raise UnitDecodeError(f"Enregistrement #{index}: tuple attendu, reçu {type(record).__name__}")

        if len(record) != LIST_UNITS_RECORD_ARITY:
            raise UnitDecodeError(
                f"Enregistrement #{index}: {len(record)} champ(s), {LIST_UNITS_RECORD_ARITY} attendus"
            )

        name = record[0]
        if not isinstance(name, str) or not name:
            raise UnitDecodeError(f"Enregistrement #{index}: nom d'unité invalide {name!r}")

        return name
