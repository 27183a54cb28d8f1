"""
Exceptions de l'inventaire de services

Seules les erreurs de connexion et d'énumération interrompent l'exécution.
Les erreurs propres à une unité sont absorbées par le coordinateur.
"""


class InventoryError(Exception):
    """Classe de base des erreurs de l'inventaire"""


class ManagerConnectionError(InventoryError, ConnectionError):
    """Connexion au gestionnaire de services impossible"""


class ManagerQueryError(InventoryError):
    """Le gestionnaire a refusé ou fait échouer la requête d'énumération"""


class UnitDecodeError(InventoryError):
    """Réponse d'énumération mal formée"""


class ResolveQueryError(InventoryError):
    """Impossible d'interroger la propriété d'une unité"""

    def __init__(self, unit_name: str, message: str):
        super().__init__(f"{unit_name}: {message}")
        self.unit_name = unit_name
