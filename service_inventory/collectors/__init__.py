"""
Package des collecteurs de l'inventaire de services

Ce package contient les étapes de la collecte :
- Collecteur de base (classe abstraite)
- Énumération des unités de service
- Résolution du fichier unité de chaque service
- Lecture des fichiers unité
"""

from .enumerator import UnitEnumerator
from .resolver import UnitPathResolver, parse_property_output
from .unit_file import UnitFileParser

__all__ = ['UnitEnumerator', 'UnitPathResolver', 'UnitFileParser', 'parse_property_output']
