"""
Accès D-Bus au gestionnaire systemd

Ce backend appelle directement org.freedesktop.systemd1 via dbus-python :
- ListUnits pour l'énumération
- GetUnit puis Properties.Get pour les propriétés d'une unité

Chaque instance ouvre sa propre connexion privée au bus système.
"""

from typing import Any, List, Sequence

from .base import BaseManagerBus
from ..core.constants import (
    DBUS_PROPERTIES_INTERFACE,
    NO_SUCH_UNIT_ERROR,
    SYSTEMD_BUS_NAME,
    SYSTEMD_MANAGER_INTERFACE,
    SYSTEMD_OBJECT_PATH,
    SYSTEMD_UNIT_INTERFACE,
)
from ..core.errors import ManagerConnectionError, ManagerQueryError, ResolveQueryError


def _dbus_to_python(value: Any) -> Any:
    """Convertit récursivement les types dbus en types Python natifs"""
    if isinstance(value, str):
        return str(value)
    if isinstance(value, bool):
        return bool(value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    if isinstance(value, bytes):
        return bytes(value)
    if isinstance(value, dict):
        return {_dbus_to_python(k): _dbus_to_python(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return tuple(_dbus_to_python(item) for item in value)
    return value


class DBusManagerBus(BaseManagerBus):
    """
    Backend D-Bus du gestionnaire systemd

    Nécessite le paquet dbus-python (extra "dbus").
    """

    backend_name = "dbus"

    def __init__(self, logger, timeout: float = 10.0):
        super().__init__(logger, timeout)
        self._dbus = None
        self._bus = None
        self._manager = None

    def connect(self):
        """
        Ouvre une connexion privée au bus système

        Raises:
            ManagerConnectionError: dbus-python absent ou bus injoignable
        """
        try:
            import dbus
        except ImportError as e:
            raise ManagerConnectionError(
                "dbus-python n'est pas installé (pip install 'watchman-service-inventory[dbus]') "
                "ou utilisez le backend systemctl"
            ) from e

        self._dbus = dbus

        try:
            self._bus = dbus.SystemBus(private=True)
            systemd_object = self._bus.get_object(SYSTEMD_BUS_NAME, SYSTEMD_OBJECT_PATH)
            self._manager = dbus.Interface(systemd_object, SYSTEMD_MANAGER_INTERFACE)
        except dbus.exceptions.DBusException as e:
            self.close()
            raise ManagerConnectionError(f"Connexion au bus système impossible: {e}") from e

        self.connected = True
        self.logger.debug("Connexion D-Bus privée ouverte")

    def list_units(self) -> List[Sequence[Any]]:
        try:
            reply = self._manager.ListUnits(timeout=self.timeout)
        except self._dbus.exceptions.DBusException as e:
            raise ManagerQueryError(f"Échec de l'appel ListUnits: {e}") from e

        return [_dbus_to_python(record) for record in reply]

    def show_property(self, unit_name: str, property_name: str) -> str:
        dbus = self._dbus
        try:
            unit_path = self._manager.GetUnit(unit_name, timeout=self.timeout)
            unit_object = self._bus.get_object(SYSTEMD_BUS_NAME, unit_path)
            properties = dbus.Interface(unit_object, DBUS_PROPERTIES_INTERFACE)
            value = properties.Get(SYSTEMD_UNIT_INTERFACE, property_name, timeout=self.timeout)

        except dbus.exceptions.DBusException as e:
            if e.get_dbus_name() == NO_SUCH_UNIT_ERROR:
                self.logger.debug(f"Unité inconnue du gestionnaire: {unit_name}")
                return ""
            raise ResolveQueryError(unit_name, f"échec D-Bus: {e}") from e

        # Même forme que la sortie de `systemctl show -p`
        return f"{property_name}={_dbus_to_python(value)}\n"

    def close(self):
        if self._bus is not None:
            try:
                self._bus.close()
            except self._dbus.exceptions.DBusException as e:
                self.logger.debug(f"Erreur à la fermeture de la connexion D-Bus: {e}")
        self._bus = None
        self._manager = None
        super().close()
