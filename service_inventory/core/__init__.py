"""
Module Core - Composants principaux de l'inventaire de services

Ce module contient les fonctionnalités de base de l'outil :
- Configuration
- Logging
- Coordination de la collecte
- Mise en forme du rapport
- Communication avec le serveur
"""
