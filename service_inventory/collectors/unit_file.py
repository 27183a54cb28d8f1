"""
Lecture des fichiers unité systemd

Format ligne par ligne "Clé=Valeur" :
- lignes vides et lignes commençant par '#' ignorées
- découpage sur le premier '='
- seules les clés Type, ExecStart, Description et User sont retenues
- la première occurrence d'une clé l'emporte sur les suivantes
- lignes et valeurs trop longues tronquées
"""

from typing import Dict, Iterable, Iterator, TextIO

from ..core.constants import MAX_LINE_LENGTH, MAX_VALUE_LENGTH, UNIT_FILE_KEYS


class UnitFileParser:
    """
    Parseur des fichiers unité

    Un fichier illisible donne un résultat vide, jamais une exception.
    """

    def __init__(self, logger, max_line_length: int = MAX_LINE_LENGTH,
                 max_value_length: int = MAX_VALUE_LENGTH,
                 keys: Iterable[str] = UNIT_FILE_KEYS):
        """
        Args:
            logger: Instance de logging.Logger
            max_line_length: Longueur maximale lue par ligne
            max_value_length: Longueur maximale conservée par valeur
            keys: Clés reconnues (sensibles à la casse)
        """
        self.logger = logger
        self.max_line_length = max_line_length
        self.max_value_length = max_value_length
        self.keys = frozenset(keys)

    @classmethod
    def from_config(cls, config, logger) -> 'UnitFileParser':
        collection_config = config.get_collection_config()
        return cls(
            logger,
            max_line_length=collection_config['max_line_length'],
            max_value_length=collection_config['max_value_length']
        )

    def parse(self, path: str) -> Dict[str, str]:
        """
        Lit un fichier unité

        Args:
            path: Chemin du fichier

        Returns:
            dict: Clés reconnues présentes dans le fichier
        """
        try:
            with open(path, 'r', encoding='utf-8', errors='replace') as f:
                return self.parse_lines(self.read_lines(f))
        except FileNotFoundError:
            self.logger.warning(f"Fichier unité introuvable: {path}")
        except OSError as e:
            self.logger.warning(f"Erreur lecture fichier unité {path}: {e}")

        return {}

    def parse_lines(self, lines: Iterable[str]) -> Dict[str, str]:
        """
        Extrait les clés reconnues d'une suite de lignes

        Args:
            lines: Lignes du fichier (fins de ligne incluses ou non)

        Returns:
            dict: Clés reconnues, première occurrence
        """
        values = {}

        for line in self._truncated(lines):
            line = line.rstrip('\r\n')

            if not line or line.startswith('#'):
                continue

            key, sep, value = line.partition('=')
            key = key.strip()
            value = value.strip()

            if not sep or not value:
                continue

            if key in self.keys and key not in values:
                values[key] = value[:self.max_value_length]

        return values

    def read_lines(self, stream: TextIO) -> Iterator[str]:
        """
        Lit un flux texte ligne par ligne, sans jamais charger plus de
        max_line_length caractères à la fois

        Le reste d'une ligne trop longue est consommé par blocs puis ignoré.

        Args:
            stream: Fichier ouvert en mode texte

        Yields:
            str: Lignes, tronquées à max_line_length
        """
        limit = self.max_line_length
        while True:
            line = stream.readline(limit)
            if not line:
                return
            if len(line) == limit and not line.endswith("\n"):
                self._skip_rest_of_line(stream)
            yield line

    def _skip_rest_of_line(self, stream: TextIO):
        while True:
            chunk = stream.readline(self.max_line_length)
            if not chunk or chunk.endswith("\n"):
                return

    def _truncated(self, lines: Iterable[str]) -> Iterator[str]:
        for line in lines:
            if len(line) > self.max_line_length:
                yield line[:self.max_line_length]
            else:
                yield line
