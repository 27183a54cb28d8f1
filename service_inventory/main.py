"""
Point d'entrée principal de Watchman Service Inventory

L'outil s'exécute une fois : il énumère les services systemd, collecte
les métadonnées de chacun en parallèle, affiche le rapport puis se termine.
Le rapport peut aussi être écrit dans un fichier.
"""

import sys
import time
import argparse
from typing import Optional

from service_inventory.core.collector import ServiceInventoryCollector
from service_inventory.core.config import InventoryConfig, create_default_config
from service_inventory.core.constants import BACKENDS, LOG_LEVELS, OUTPUT_FORMATS
from service_inventory.core.errors import InventoryError
from service_inventory.core.logger import InventoryLogger
from service_inventory.core.report import format_elapsed, render_report, write_report


class ServiceInventoryApp:
    """
    Application d'inventaire des services

    Cette classe relie la configuration, le logging et le collecteur,
    et exécute une collecte unique.
    """

    def __init__(self, config: InventoryConfig, log_level: Optional[str] = None, collector=None):
        """
        Initialise l'application

        Args:
            config: Instance de InventoryConfig (déjà validée)
            log_level: Niveau de log imposé
            collector: Collecteur à utiliser (par défaut selon la configuration)
        """
        self.config = config

        # Logger
        self.logger = InventoryLogger(self.config, level=log_level)
        self.app_logger = self.logger.get_logger()

        # Informations de diagnostic
        self.logger.log_system_info()
        self.logger.log_config_info(self.config)

        self.collector = collector or ServiceInventoryCollector(self.config, self.logger)

        self.app_logger.debug("Watchman Service Inventory initialisé")

    def run_once(self) -> int:
        """
        Effectue l'inventaire et produit le rapport

        Returns:
            int: Code de sortie (0 succès, 1 échec)
        """
        start_time = time.time()
        output_config = self.config.get_output_config()
        output_format = output_config['format']

        try:
            report = self.collector.collect_all()

        except InventoryError as e:
            self.app_logger.error(f"Échec de l'énumération des services: {e}")
            print(f"Failed to enumerate service names: {e}", file=sys.stderr)
            if output_format == 'text':
                sys.stdout.write(format_elapsed(time.time() - start_time))
            return 1

        elapsed = time.time() - start_time
        content = render_report(report, output_format, elapsed)

        if output_config['file']:
            try:
                write_report(content, output_config['file'])
            except OSError as e:
                self.app_logger.error(f"Écriture du rapport impossible: {e}")
                print(f"❌ Erreur écriture du rapport: {e}", file=sys.stderr)
                return 1
            print(f"✅ Rapport sauvegardé dans: {output_config['file']}", file=sys.stderr)
        else:
            sys.stdout.write(content)

        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='watchman-service-inventory',
        description='Inventaire des services systemd - fichier unité, Type, ExecStart, Description, User'
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        help='Chemin vers le fichier de configuration'
    )

    parser.add_argument(
        '--create-config',
        action='store_true',
        help='Crée un fichier de configuration par défaut'
    )

    parser.add_argument(
        '--validate-config',
        action='store_true',
        help='Valide la configuration actuelle'
    )

    parser.add_argument(
        '--backend', '-b',
        choices=BACKENDS,
        help='Accès au gestionnaire de services'
    )

    parser.add_argument(
        '--max-workers', '-w',
        type=int,
        help='Nombre maximal de services traités en parallèle (0 = un par service)'
    )

    parser.add_argument(
        '--timeout',
        type=float,
        help='Délai maximal d\'une requête au gestionnaire (secondes)'
    )

    parser.add_argument(
        '--format', '-f',
        choices=OUTPUT_FORMATS,
        help='Format du rapport'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        help='Fichier de sortie du rapport (stdout par défaut)'
    )

    parser.add_argument(
        '--log-level', '-l',
        choices=LOG_LEVELS,
        help='Niveau de log'
    )

    return parser


def apply_overrides(config: InventoryConfig, args: argparse.Namespace):
    """
    Reporte les options de ligne de commande dans la configuration

    Args:
        config: Instance de InventoryConfig
        args: Arguments analysés
    """
    overrides = {
        ('manager', 'backend'): args.backend,
        ('manager', 'command_timeout'): args.timeout,
        ('collection', 'max_workers'): args.max_workers,
        ('output', 'format'): args.format,
        ('output', 'file'): args.output,
        ('inventory', 'log_level'): args.log_level,
    }

    for (section, option), value in overrides.items():
        if value is not None:
            config.set(section, option, value)


def main(argv=None) -> int:
    """
    Point d'entrée principal avec gestion des arguments de ligne de commande
    """
    args = build_parser().parse_args(argv)

    # Créer une configuration par défaut
    if args.create_config:
        if not args.config:
            print("❌ --create-config nécessite --config", file=sys.stderr)
            return 1
        try:
            create_default_config(args.config)
            print(f"✅ Configuration par défaut créée: {args.config}")
            return 0
        except OSError as e:
            print(f"❌ Erreur création configuration: {e}", file=sys.stderr)
            return 1

    config = InventoryConfig(args.config)
    apply_overrides(config, args)

    # Valider la configuration
    if args.validate_config:
        if config.validate():
            print("✅ Configuration valide")
            return 0
        print("❌ Configuration invalide")
        return 1

    if not config.validate():
        return 1

    try:
        app = ServiceInventoryApp(config, log_level=args.log_level)
        return app.run_once()

    except KeyboardInterrupt:
        print("\n🛑 Arrêt demandé par l'utilisateur", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
