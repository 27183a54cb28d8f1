"""
Watchman Service Inventory - Inventaire des services systemd d'un hôte

Ce module principal fournit un outil de diagnostic ponctuel qui énumère
les services en cours d'exécution, résout le fichier unité de chacun et
en extrait les métadonnées principales (Type, ExecStart, Description, User).

Author: Watchman Agent Client Team
Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "Watchman Agent Client Team"

# Imports principaux pour faciliter l'utilisation
from .core.collector import ServiceInventoryCollector
from .core.config import InventoryConfig
from .core.logger import InventoryLogger

__all__ = ['ServiceInventoryCollector', 'InventoryConfig', 'InventoryLogger']
