"""
Mise en forme du rapport d'inventaire

- Texte : un bloc par service, dans l'ordre d'énumération, puis la durée
- JSON : rapport complet avec ses métadonnées
"""

import json
import os
from typing import Iterable, Optional

from .models import InventoryReport, UnitRecord


def format_record(record: UnitRecord) -> str:
    """Bloc texte d'un service, terminé par une ligne vide"""
    return (
        f"Service Name: {record.service_name}\n"
        f"Fragment Path: {record.fragment_path}\n"
        f"Type: {record.unit_type}\n"
        f"ExecStart: {record.exec_start}\n"
        f"Description: {record.description}\n"
        f"User: {record.user}\n"
        "\n"
    )


def format_elapsed(elapsed_seconds: float) -> str:
    return f"Elapsed time: {elapsed_seconds:.2f} seconds\n"


def format_text_report(records: Iterable[UnitRecord], elapsed_seconds: Optional[float] = None) -> str:
    """
    Rapport texte lisible

    Args:
        records: Enregistrements dans l'ordre d'énumération
        elapsed_seconds: Durée à afficher en fin de rapport (omise si None)

    Returns:
        str: Rapport complet
    """
    text = ''.join(format_record(record) for record in records)
    if elapsed_seconds is not None:
        text += format_elapsed(elapsed_seconds)
    return text


def format_json_report(report: InventoryReport) -> str:
    return json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n"


def render_report(report: InventoryReport, output_format: str, elapsed_seconds: float) -> str:
    """
    Rend le rapport dans le format demandé

    Args:
        report: Rapport complet
        output_format: text ou json
        elapsed_seconds: Durée totale de l'exécution

    Returns:
        str: Rapport rendu
    """
    if output_format == 'json':
        return format_json_report(report)
    if output_format == 'text':
        return format_text_report(report.services, elapsed_seconds)
    raise ValueError(f"Format de sortie inconnu: {output_format}")


def write_report(content: str, output_file: str):
    """
    Écrit le rapport dans un fichier

    Crée les dossiers parents si nécessaire.
    """
    output_dir = os.path.dirname(output_file)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir, exist_ok=True)

    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(content)
