"""Modèles de données de l'inventaire de services."""

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Mapping, Optional

from .constants import NOT_SPECIFIED, SERVICE_FILE_NOT_FOUND


@dataclass(frozen=True)
class PathResolution:
    """Résultat de la résolution du fichier unité d'un service.

    Attributes:
        path: Chemin du fichier unité, None si absent
        found: True si le gestionnaire a fourni un chemin non vide
    """

    path: Optional[str] = None
    found: bool = False

    @classmethod
    def not_found(cls) -> 'PathResolution':
        return cls(path=None, found=False)


@dataclass(frozen=True)
class UnitRecord:
    """Entrée du rapport final pour un service.

    Attributes:
        service_name: Nom de l'unité tel qu'énuméré
        fragment_path: Chemin du fichier unité ou marqueur "introuvable"
        unit_type: Valeur de Type=
        exec_start: Valeur de ExecStart=
        description: Valeur de Description=
        user: Valeur de User=
    """

    service_name: str
    fragment_path: str = SERVICE_FILE_NOT_FOUND
    unit_type: str = NOT_SPECIFIED
    exec_start: str = NOT_SPECIFIED
    description: str = NOT_SPECIFIED
    user: str = NOT_SPECIFIED

    @classmethod
    def not_found(cls, service_name: str) -> 'UnitRecord':
        """Enregistrement dégradé: aucun fichier unité, champs par défaut."""
        return cls(service_name=service_name)

    @classmethod
    def from_unit_file(cls, service_name: str, fragment_path: str,
                       parsed: Mapping[str, str]) -> 'UnitRecord':
        """Construit un enregistrement à partir du résultat du parseur.

        Les clés absentes ou vides prennent la valeur par défaut.

        Args:
            service_name: Nom de l'unité
            fragment_path: Chemin du fichier unité
            parsed: Clés extraites du fichier unité

        Returns:
            UnitRecord complet
        """
        return cls(
            service_name=service_name,
            fragment_path=fragment_path,
            unit_type=parsed.get('Type') or NOT_SPECIFIED,
            exec_start=parsed.get('ExecStart') or NOT_SPECIFIED,
            description=parsed.get('Description') or NOT_SPECIFIED,
            user=parsed.get('User') or NOT_SPECIFIED,
        )

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class InventoryReport:
    """Rapport complet d'une collecte.

    Attributes:
        services: Enregistrements dans l'ordre d'énumération
        collection_timestamp: Horodatage ISO du début de collecte
        hostname: Nom d'hôte
        boot_time: Démarrage de l'hôte (ISO), None si inconnu
        backend: Backend du gestionnaire utilisé
        collection_duration_seconds: Durée totale de la collecte
        stats: Compteurs (résolus, introuvables, en échec)
    """

    services: List[UnitRecord] = field(default_factory=list)
    collection_timestamp: str = ""
    hostname: str = ""
    boot_time: Optional[str] = None
    backend: str = ""
    collection_duration_seconds: float = 0.0
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def service_count(self) -> int:
        return len(self.services)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'collection_timestamp': self.collection_timestamp,
            'hostname': self.hostname,
            'boot_time': self.boot_time,
            'backend': self.backend,
            'collection_duration_seconds': self.collection_duration_seconds,
            'service_count': self.service_count,
            'stats': dict(self.stats),
            'services': [record.to_dict() for record in self.services],
        }
