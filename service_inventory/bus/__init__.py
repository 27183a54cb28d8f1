"""
Package d'accès au gestionnaire de services systemd

Ce package contient les backends en lecture seule du gestionnaire :
- D-Bus natif (dbus-python)
- Outils en ligne de commande (busctl, systemctl)
"""

from typing import Callable

from .base import BaseManagerBus
from .dbus_bus import DBusManagerBus
from .systemctl_bus import SystemctlManagerBus
from ..core.constants import BACKENDS


_BACKENDS = {
    DBusManagerBus.backend_name: DBusManagerBus,
    SystemctlManagerBus.backend_name: SystemctlManagerBus,
}


def create_bus_factory(backend: str, logger, timeout: float = 10.0) -> Callable[[], BaseManagerBus]:
    """
    Retourne une fabrique de connexions pour le backend demandé

    Chaque appel de la fabrique produit une connexion neuve, non partagée.

    Args:
        backend: Nom du backend (dbus, systemctl)
        logger: Instance de logging.Logger
        timeout: Délai maximal d'un appel au gestionnaire

    Returns:
        Callable: Fabrique de BaseManagerBus
    """
    try:
        bus_class = _BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Backend inconnu '{backend}' (attendu: {', '.join(BACKENDS)})") from None

    def factory() -> BaseManagerBus:
        return bus_class(logger, timeout=timeout)

    factory.backend_name = backend
    return factory


__all__ = ['BaseManagerBus', 'DBusManagerBus', 'SystemctlManagerBus', 'create_bus_factory']
