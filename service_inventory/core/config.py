"""
Module de configuration pour l'inventaire de services

Ce module gère la configuration de l'outil, incluant :
- Lecture des fichiers de configuration
- Validation des paramètres
- Valeurs par défaut
- Surcharges ponctuelles depuis la ligne de commande
"""

import os
import sys
import configparser
from typing import Dict, Any, Optional

from .constants import (
    BACKENDS,
    LOG_LEVELS,
    MAX_LINE_LENGTH,
    MAX_VALUE_LENGTH,
    OUTPUT_FORMATS,
    SERVICE_SUFFIX,
)


DEFAULT_CONFIG_PATH = "/etc/watchman-service-inventory/config.ini"


class InventoryConfig:
    """
    Gestionnaire de configuration pour l'inventaire de services

    Cette classe centralise la configuration : accès au gestionnaire
    systemd, parallélisme de la collecte, format de sortie et journalisation.
    """

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialise la configuration

        Args:
            config_file: Chemin vers le fichier de configuration (optionnel)
        """
        self.config = configparser.ConfigParser()
        self.config_file = config_file or DEFAULT_CONFIG_PATH

        # Définir les valeurs par défaut
        self._set_defaults()

        # Charger la configuration depuis le fichier
        self._load_config()

    def _set_defaults(self):
        """
        Définit les valeurs de configuration par défaut

        Ces valeurs sont utilisées si aucun fichier de configuration n'est trouvé
        ou si certaines sections/clés sont manquantes.
        """
        # Accès au gestionnaire de services
        self.config.add_section('manager')
        self.config.set('manager', 'backend', 'systemctl')  # systemctl, dbus
        self.config.set('manager', 'command_timeout', '10')

        # Collecte
        self.config.add_section('collection')
        self.config.set('collection', 'service_suffix', SERVICE_SUFFIX)
        self.config.set('collection', 'max_workers', '32')  # 0 = un thread par unité
        self.config.set('collection', 'max_line_length', str(MAX_LINE_LENGTH))
        self.config.set('collection', 'max_value_length', str(MAX_VALUE_LENGTH))

        # Sortie du rapport
        self.config.add_section('output')
        self.config.set('output', 'format', 'text')  # text, json
        self.config.set('output', 'file', '')

        self.config.add_section('inventory')
        self.config.set('inventory', 'log_level', 'WARNING')

        # Configuration logging
        self.config.add_section('logging')
        self.config.set('logging', 'log_file', self._get_default_log_path())
        self.config.set('logging', 'max_log_size', '10485760')  # 10MB
        self.config.set('logging', 'backup_count', '5')

    def _get_default_log_path(self) -> str:
        """
        Détermine le chemin par défaut des logs

        Returns:
            str: Chemin vers le fichier de log
        """
        if hasattr(os, 'geteuid') and os.geteuid() == 0:
            return "/var/log/watchman-service-inventory/inventory.log"
        return "/tmp/watchman-service-inventory.log"

    def _load_config(self):
        """
        Charge la configuration depuis le fichier

        Si le fichier n'existe pas, utilise les valeurs par défaut.
        Les messages partent sur stderr, stdout étant réservé au rapport.
        """
        try:
            if os.path.exists(self.config_file):
                self.config.read(self.config_file, encoding='utf-8')
            elif self.config_file != DEFAULT_CONFIG_PATH:
                print(f"Fichier de configuration non trouvé: {self.config_file}", file=sys.stderr)
                print("Utilisation des valeurs par défaut", file=sys.stderr)

        except configparser.Error as e:
            print(f"Erreur lors du chargement de la configuration: {e}", file=sys.stderr)
            print("Utilisation des valeurs par défaut", file=sys.stderr)

    def get(self, section: str, option: str, fallback: Any = None) -> str:
        """
        Récupère une valeur de configuration

        Args:
            section: Nom de la section
            option: Nom de l'option
            fallback: Valeur par défaut si non trouvée

        Returns:
            str: Valeur de configuration
        """
        return self.config.get(section, option, fallback=fallback)

    def getboolean(self, section: str, option: str, fallback: bool = False) -> bool:
        """Récupère une valeur booléenne de configuration"""
        try:
            return self.config.getboolean(section, option, fallback=fallback)
        except ValueError:
            return fallback

    def getint(self, section: str, option: str, fallback: int = 0) -> int:
        """Récupère une valeur entière de configuration"""
        try:
            return self.config.getint(section, option, fallback=fallback)
        except ValueError:
            return fallback

    def getfloat(self, section: str, option: str, fallback: float = 0.0) -> float:
        """Récupère une valeur décimale de configuration"""
        try:
            return self.config.getfloat(section, option, fallback=fallback)
        except ValueError:
            return fallback

    def set(self, section: str, option: str, value):
        """
        Définit une valeur de configuration

        Args:
            section: Nom de la section
            option: Nom de l'option
            value: Nouvelle valeur
        """
        if not self.config.has_section(section):
            self.config.add_section(section)
        self.config.set(section, option, str(value))

    def save(self):
        """
        Sauvegarde la configuration dans le fichier

        Crée les dossiers parents si nécessaire.
        """
        config_dir = os.path.dirname(self.config_file)
        if config_dir and not os.path.exists(config_dir):
            os.makedirs(config_dir, exist_ok=True)

        with open(self.config_file, 'w', encoding='utf-8') as f:
            self.config.write(f)

    def get_manager_config(self) -> Dict[str, Any]:
        """
        Récupère la configuration d'accès au gestionnaire de services

        Returns:
            dict: backend et délai maximal d'une requête
        """
        return {
            'backend': self.get('manager', 'backend', 'systemctl'),
            'command_timeout': self.getfloat('manager', 'command_timeout', 10.0)
        }

    def get_collection_config(self) -> Dict[str, Any]:
        """
        Récupère la configuration de la collecte

        Returns:
            dict: Configuration de collecte
        """
        return {
            'service_suffix': self.get('collection', 'service_suffix', SERVICE_SUFFIX),
            'max_workers': self.getint('collection', 'max_workers', 32),
            'max_line_length': self.getint('collection', 'max_line_length', MAX_LINE_LENGTH),
            'max_value_length': self.getint('collection', 'max_value_length', MAX_VALUE_LENGTH)
        }

    def get_output_config(self) -> Dict[str, Any]:
        return {
            'format': self.get('output', 'format', 'text'),
            'file': self.get('output', 'file', '')
        }

    def get_logging_config(self) -> Dict[str, Any]:
        return {
            'log_level': self.get('inventory', 'log_level', 'WARNING'),
            'log_file': self.get('logging', 'log_file'),
            'max_log_size': self.getint('logging', 'max_log_size', 10485760),
            'backup_count': self.getint('logging', 'backup_count', 5)
        }

    def validate(self) -> bool:
        """
        Valide la configuration courante

        Returns:
            bool: True si la configuration est valide, False sinon
        """
        errors = []

        backend = self.get('manager', 'backend')
        if backend not in BACKENDS:
            errors.append(f"Backend invalide (doit être: {', '.join(BACKENDS)})")

        if self.getfloat('manager', 'command_timeout', -1.0) <= 0:
            errors.append("Délai de requête invalide (doit être positif)")

        if self.getint('collection', 'max_workers', -1) < 0:
            errors.append("Nombre de workers invalide (doit être >= 0)")

        for option in ('max_line_length', 'max_value_length'):
            if self.getint('collection', option, 0) < 1:
                errors.append(f"Longueur maximale invalide: {option}")

        if not self.get('collection', 'service_suffix'):
            errors.append("Suffixe de service vide")

        output_format = self.get('output', 'format')
        if output_format not in OUTPUT_FORMATS:
            errors.append(f"Format de sortie invalide (doit être: {', '.join(OUTPUT_FORMATS)})")

        log_level = self.get('inventory', 'log_level', '').upper()
        if log_level not in LOG_LEVELS:
            errors.append("Niveau de log invalide")

        if errors:
            for error in errors:
                print(f"Erreur de configuration: {error}", file=sys.stderr)
            return False

        return True


# Fonction utilitaire pour créer une configuration par défaut
def create_default_config(config_path: str) -> InventoryConfig:
    """
    Crée un fichier de configuration par défaut

    Args:
        config_path: Chemin où créer le fichier de configuration

    Returns:
        InventoryConfig: Instance de configuration créée
    """
    config = InventoryConfig(config_path)
    config.save()
    return config
