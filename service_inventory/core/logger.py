"""
Module de logging pour l'inventaire de services

Ce module fournit un système de logging centralisé avec :
- Rotation automatique des logs
- Différents niveaux de log
- Formatage cohérent
- Sortie console sur stderr (stdout est réservé au rapport)
"""

import os
import sys
import logging
import logging.handlers
from typing import List, Optional


LOGGER_NAME = 'WatchmanServiceInventory'

# Attribut posé sur les handlers installés par InventoryLogger
HANDLER_MARK = '_watchman_inventory'


class InventoryLogger:
    """
    Gestionnaire de logging pour l'inventaire de services

    Cette classe configure et gère le système de logging pour l'ensemble
    de l'application, avec rotation automatique et formatage approprié.
    """

    def __init__(self, config=None, level: Optional[str] = None):
        """
        Initialise le système de logging

        Args:
            config: Instance de InventoryConfig pour récupérer les paramètres de log
            level: Niveau de log imposé (prioritaire sur la configuration)
        """
        self.config = config
        self.logger = logging.getLogger(LOGGER_NAME)

        # Éviter la duplication si déjà configuré (handlers tiers ignorés)
        if not self.own_handlers():
            self._setup_logging(level)
        elif level:
            self.set_level(level)

    def _setup_logging(self, level: Optional[str] = None):
        """
        Configure le système de logging avec les handlers appropriés

        Configure :
        - Le niveau de log basé sur la configuration
        - La rotation des fichiers de log
        - La sortie console
        """
        if self.config:
            logging_config = self.config.get_logging_config()
            log_level_str = logging_config['log_level']
            log_file = logging_config['log_file']
            max_size = logging_config['max_log_size']
            backup_count = logging_config['backup_count']
        else:
            log_level_str = 'WARNING'
            log_file = self._get_default_log_file()
            max_size = 10485760  # 10MB
            backup_count = 5

        if level:
            log_level_str = level

        # Convertir le niveau de log string en constante logging
        log_level = getattr(logging, log_level_str.upper(), logging.WARNING)
        self.logger.setLevel(log_level)
        self.logger.propagate = False

        # Format des messages de log
        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # Handler pour fichier avec rotation
        if log_file:
            try:
                log_dir = os.path.dirname(log_file)
                if log_dir and not os.path.exists(log_dir):
                    os.makedirs(log_dir, exist_ok=True)

                file_handler = logging.handlers.RotatingFileHandler(
                    filename=log_file,
                    maxBytes=max_size,
                    backupCount=backup_count,
                    encoding='utf-8'
                )
                file_handler.setLevel(log_level)
                file_handler.setFormatter(formatter)
                self._add_handler(file_handler)

            except OSError as e:
                print(f"Erreur lors de la configuration du logging fichier: {e}", file=sys.stderr)

        # Handler pour la console
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(logging.Formatter(fmt='%(levelname)s - %(message)s'))
        self._add_handler(console_handler)

        self.logger.debug("Système de logging initialisé")
        self.logger.debug(f"Niveau de log: {log_level_str}")
        if log_file:
            self.logger.debug(f"Fichier de log: {log_file}")

    def _get_default_log_file(self) -> str:
        return "/tmp/watchman-service-inventory.log"

    def _add_handler(self, handler: logging.Handler):
        setattr(handler, HANDLER_MARK, True)
        self.logger.addHandler(handler)

    def own_handlers(self) -> List[logging.Handler]:
        """Handlers installés par InventoryLogger sur le logger nommé"""
        return [h for h in self.logger.handlers if getattr(h, HANDLER_MARK, False)]

    def set_level(self, level: str):
        """
        Change le niveau de log du logger et de ses handlers

        Args:
            level: Nom du niveau (DEBUG, INFO, ...)
        """
        log_level = getattr(logging, level.upper(), logging.WARNING)
        self.logger.setLevel(log_level)
        for handler in self.own_handlers():
            handler.setLevel(log_level)

    def get_logger(self) -> logging.Logger:
        """
        Retourne l'instance du logger

        Returns:
            logging.Logger: Instance du logger configuré
        """
        return self.logger

    def log_system_info(self):
        """
        Log les informations système de base au démarrage

        Utile pour le diagnostic et le debug
        """
        self.logger.info(f"Plateforme: {sys.platform}")
        self.logger.info(f"Version Python: {sys.version.split()[0]}")
        try:
            import getpass
            self.logger.info(f"Utilisateur: {getpass.getuser()}")
        except (ImportError, KeyError, OSError):
            self.logger.info("Utilisateur: Non déterminé")

    def log_config_info(self, config):
        """
        Log la configuration effective

        Args:
            config: Instance de InventoryConfig
        """
        self.logger.info("=== Configuration de l'inventaire ===")

        for key, value in config.get_manager_config().items():
            self.logger.info(f"Manager.{key}: {value}")

        for key, value in config.get_collection_config().items():
            self.logger.info(f"Collection.{key}: {value}")

        for key, value in config.get_output_config().items():
            self.logger.info(f"Output.{key}: {value}")

        self.logger.info("=== Fin configuration ===")

