"""Pytest configuration and shared fixtures."""

import logging
import threading

import pytest

from service_inventory.bus.base import BaseManagerBus
from service_inventory.core.config import InventoryConfig
from service_inventory.core.logger import HANDLER_MARK, LOGGER_NAME, InventoryLogger


def unit_tuple(name, description="demo unit", active="active", sub="running"):
    """Build a ListUnits record (ssssssouso)."""
    return (
        name,
        description,
        "loaded",
        active,
        sub,
        "",
        f"/org/freedesktop/systemd1/unit/{name.replace('.', '_2e')}",
        0,
        "",
        "/",
    )


class FakeManager:
    """In-memory service manager shared by every FakeManagerBus it creates."""

    backend_name = "fake"

    def __init__(self, units=(), fragment_paths=None, property_errors=None,
                 connect_error=None, list_error=None):
        self.units = list(units)
        self.fragment_paths = dict(fragment_paths or {})
        self.property_errors = dict(property_errors or {})
        self.connect_error = connect_error
        self.list_error = list_error

        self._lock = threading.Lock()
        self.connections = 0
        self.open_connections = 0
        self.list_calls = 0
        self.property_calls = []

    def factory(self):
        return FakeManagerBus(self)

    # Attribute read by the collector to report the backend in use
    factory.backend_name = backend_name


class FakeManagerBus(BaseManagerBus):
    backend_name = "fake"

    def __init__(self, manager):
        super().__init__(logging.getLogger("tests.fake_bus"), timeout=1.0)
        self.manager = manager

    def connect(self):
        with self.manager._lock:
            self.manager.connections += 1
        if self.manager.connect_error is not None:
            raise self.manager.connect_error
        with self.manager._lock:
            self.manager.open_connections += 1
        self.connected = True

    def list_units(self):
        with self.manager._lock:
            self.manager.list_calls += 1
        if self.manager.list_error is not None:
            raise self.manager.list_error
        return self.manager.units

    def show_property(self, unit_name, property_name):
        with self.manager._lock:
            self.manager.property_calls.append(unit_name)
        if unit_name in self.manager.property_errors:
            raise self.manager.property_errors[unit_name]
        value = self.manager.fragment_paths.get(unit_name)
        if value is None:
            return ""
        return f"{property_name}={value}\n"

    def close(self):
        if self.connected:
            with self.manager._lock:
                self.manager.open_connections -= 1
        super().close()


@pytest.fixture(autouse=True)
def reset_inventory_logger():
    """Drop the handlers InventoryLogger bound to the shared named logger."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if not getattr(handler, HANDLER_MARK, False):
            continue
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def config(tmp_path):
    """Default configuration logging into the test directory."""
    config = InventoryConfig(str(tmp_path / "missing-config.ini"))
    config.set('logging', 'log_file', str(tmp_path / "inventory.log"))
    return config


@pytest.fixture
def inventory_logger(config):
    return InventoryLogger(config)


@pytest.fixture
def logger(inventory_logger):
    return inventory_logger.get_logger()


@pytest.fixture
def write_unit_file(tmp_path):
    """Factory writing a unit file and returning its path."""
    counter = {'n': 0}

    def _write(content, name=None):
        counter['n'] += 1
        path = tmp_path / (name or f"unit-{counter['n']}.service")
        path.write_text(content, encoding='utf-8')
        return str(path)

    return _write
