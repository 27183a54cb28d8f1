"""
Accès au gestionnaire systemd par ses outils en ligne de commande

Ce backend n'a besoin d'aucune bibliothèque D-Bus :
- busctl --json=short call ... ListUnits pour l'énumération
- systemctl show -p <Propriété> <unité> pour les propriétés

Chaque requête lance son propre processus.
"""

import os
import json
import shutil
import subprocess
from typing import Any, List, Sequence

import psutil

from .base import BaseManagerBus
from ..core.constants import (
    LIST_UNITS_SIGNATURE,
    SYSTEMD_BUS_NAME,
    SYSTEMD_MANAGER_INTERFACE,
    SYSTEMD_OBJECT_PATH,
)
from ..core.errors import (
    ManagerConnectionError,
    ManagerQueryError,
    ResolveQueryError,
    UnitDecodeError,
)


SYSTEMD_RUNTIME_DIR = "/run/systemd/system"


def _init_process_name() -> str:
    """Nom du processus PID 1, pour les diagnostics"""
    try:
        return psutil.Process(1).name()
    except (psutil.Error, OSError):
        return "inconnu"


class SystemctlManagerBus(BaseManagerBus):
    """
    Backend ligne de commande du gestionnaire systemd
    """

    backend_name = "systemctl"

    def connect(self):
        """
        Vérifie que systemd est le gestionnaire actif et que ses outils sont présents

        Raises:
            ManagerConnectionError: systemd absent ou outils introuvables
        """
        if not os.path.isdir(SYSTEMD_RUNTIME_DIR):
            raise ManagerConnectionError(
                f"systemd n'est pas le gestionnaire de services actif "
                f"({SYSTEMD_RUNTIME_DIR} absent, PID 1: {_init_process_name()})"
            )

        for tool in ('busctl', 'systemctl'):
            if shutil.which(tool) is None:
                raise ManagerConnectionError(f"Commande introuvable: {tool}")

        self.connected = True

    def _run(self, command: List[str]) -> subprocess.CompletedProcess:
        """
        Exécute une commande sans shell

        Args:
            command: Commande et arguments

        Returns:
            subprocess.CompletedProcess: Résultat (sortie texte)

        Raises:
            OSError: Lancement impossible
            subprocess.TimeoutExpired: Délai dépassé
        """
        self.logger.debug(f"Exécution: {' '.join(command)}")
        return subprocess.run(
            command,
            capture_output=True,
            text=True,
            timeout=self.timeout
        )

    def list_units(self) -> List[Sequence[Any]]:
        command = [
            'busctl', '--system', '--json=short', 'call',
            SYSTEMD_BUS_NAME, SYSTEMD_OBJECT_PATH, SYSTEMD_MANAGER_INTERFACE, 'ListUnits'
        ]

        try:
            result = self._run(command)
        except subprocess.TimeoutExpired as e:
            raise ManagerQueryError(f"Timeout de ListUnits (>{self.timeout}s)") from e
        except OSError as e:
            raise ManagerConnectionError(f"Lancement de busctl impossible: {e}") from e

        if result.returncode != 0:
            raise ManagerQueryError(
                f"ListUnits a échoué (code: {result.returncode}): {result.stderr.strip()}"
            )

        return self._decode_list_units(result.stdout)

    def _decode_list_units(self, output: str) -> List[Sequence[Any]]:
        """
        Décode la réponse JSON de busctl

        Format attendu: {"type": "a(ssssssouso)", "data": [[[...], ...]]}
        """
        try:
            payload = json.loads(output)
        except json.JSONDecodeError as e:
            raise UnitDecodeError(f"Réponse ListUnits non JSON: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get('data'), list):
            raise UnitDecodeError("Réponse ListUnits sans champ 'data'")

        signature = payload.get('type')
        if signature != LIST_UNITS_SIGNATURE:
            raise UnitDecodeError(f"Signature ListUnits inattendue: {signature!r}")

        data = payload['data']
        if len(data) != 1 or not isinstance(data[0], list):
            raise UnitDecodeError("Réponse ListUnits: tableau d'unités attendu")

        return data[0]

    def show_property(self, unit_name: str, property_name: str) -> str:
        command = ['systemctl', 'show', '-p', property_name, '--', unit_name]

        try:
            result = self._run(command)
        except subprocess.TimeoutExpired as e:
            raise ResolveQueryError(unit_name, f"timeout (>{self.timeout}s)") from e
        except OSError as e:
            raise ResolveQueryError(unit_name, f"lancement de systemctl impossible: {e}") from e

        if result.returncode != 0:
            raise ResolveQueryError(
                unit_name,
                f"systemctl show a échoué (code: {result.returncode}): {result.stderr.strip()}"
            )

        return result.stdout
