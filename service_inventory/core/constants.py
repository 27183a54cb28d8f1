"""Constantes partagées de l'inventaire de services"""

# Gestionnaire systemd
SYSTEMD_BUS_NAME = "org.freedesktop.systemd1"
SYSTEMD_OBJECT_PATH = "/org/freedesktop/systemd1"
SYSTEMD_MANAGER_INTERFACE = "org.freedesktop.systemd1.Manager"
SYSTEMD_UNIT_INTERFACE = "org.freedesktop.systemd1.Unit"
DBUS_PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"
NO_SUCH_UNIT_ERROR = "org.freedesktop.systemd1.NoSuchUnit"

# (name, description, load, active, sub, following, object path, job id, job type, job path)
LIST_UNITS_SIGNATURE = "a(ssssssouso)"
LIST_UNITS_RECORD_ARITY = 10

SERVICE_SUFFIX = ".service"
FRAGMENT_PATH_PROPERTY = "FragmentPath"

# Clés reconnues dans un fichier unité
UNIT_FILE_KEYS = ('Type', 'ExecStart', 'Description', 'User')

MAX_LINE_LENGTH = 255
MAX_VALUE_LENGTH = 255

NOT_SPECIFIED = "not specified"
SERVICE_FILE_NOT_FOUND = "service file not found"

BACKENDS = ('dbus', 'systemctl')
OUTPUT_FORMATS = ('text', 'json')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
