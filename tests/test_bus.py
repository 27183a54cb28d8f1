"""
Tests for the service manager backends.
"""
import json
import subprocess
import sys
import types
from unittest.mock import patch

import pytest

from conftest import unit_tuple
from service_inventory.bus import create_bus_factory
from service_inventory.bus.dbus_bus import DBusManagerBus
from service_inventory.bus.systemctl_bus import SystemctlManagerBus
from service_inventory.core.constants import NO_SUCH_UNIT_ERROR
from service_inventory.core.errors import (
    ManagerConnectionError,
    ManagerQueryError,
    ResolveQueryError,
    UnitDecodeError,
)


RUN = 'service_inventory.bus.systemctl_bus.subprocess.run'


def completed(stdout="", returncode=0, stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


def busctl_reply(units):
    return json.dumps({'type': 'a(ssssssouso)', 'data': [[list(unit) for unit in units]]})


@pytest.fixture
def systemctl_bus(logger):
    return SystemctlManagerBus(logger, timeout=2.0)


class TestSystemctlConnect:
    """Tests for SystemctlManagerBus.connect."""

    def test_requires_systemd_runtime_dir(self, systemctl_bus):
        with patch('service_inventory.bus.systemctl_bus.os.path.isdir', return_value=False):
            with pytest.raises(ManagerConnectionError, match="systemd"):
                systemctl_bus.connect()

        assert systemctl_bus.connected is False

    def test_requires_tools(self, systemctl_bus):
        with patch('service_inventory.bus.systemctl_bus.os.path.isdir', return_value=True), \
                patch('service_inventory.bus.systemctl_bus.shutil.which', return_value=None):
            with pytest.raises(ManagerConnectionError, match="busctl"):
                systemctl_bus.connect()

    def test_connected(self, systemctl_bus):
        with patch('service_inventory.bus.systemctl_bus.os.path.isdir', return_value=True), \
                patch('service_inventory.bus.systemctl_bus.shutil.which', return_value='/usr/bin/tool'):
            systemctl_bus.connect()

        assert systemctl_bus.connected is True


class TestSystemctlListUnits:
    """Tests for SystemctlManagerBus.list_units."""

    def test_decodes_busctl_json(self, systemctl_bus):
        units = [unit_tuple('a.service'), unit_tuple('b.socket')]

        with patch(RUN, return_value=completed(busctl_reply(units))) as run:
            records = systemctl_bus.list_units()

        assert [record[0] for record in records] == ['a.service', 'b.socket']
        assert len(records[0]) == 10
        command = run.call_args[0][0]
        assert command[:4] == ['busctl', '--system', '--json=short', 'call']
        assert command[-1] == 'ListUnits'
        assert run.call_args[1]['timeout'] == 2.0

    def test_non_zero_exit(self, systemctl_bus):
        with patch(RUN, return_value=completed(returncode=1, stderr="Access denied")):
            with pytest.raises(ManagerQueryError, match="Access denied"):
                systemctl_bus.list_units()

    def test_timeout(self, systemctl_bus):
        with patch(RUN, side_effect=subprocess.TimeoutExpired(cmd='busctl', timeout=2.0)):
            with pytest.raises(ManagerQueryError):
                systemctl_bus.list_units()

    def test_launch_failure(self, systemctl_bus):
        with patch(RUN, side_effect=FileNotFoundError("busctl")):
            with pytest.raises(ManagerConnectionError):
                systemctl_bus.list_units()

    @pytest.mark.parametrize("stdout", [
        "not json",
        json.dumps([1, 2, 3]),
        json.dumps({'type': 'a(ssssssouso)'}),
        json.dumps({'type': 'as', 'data': [[]]}),
        json.dumps({'type': 'a(ssssssouso)', 'data': []}),
        json.dumps({'type': 'a(ssssssouso)', 'data': ["a.service"]}),
    ])
    def test_malformed_reply(self, systemctl_bus, stdout):
        with patch(RUN, return_value=completed(stdout)):
            with pytest.raises(UnitDecodeError):
                systemctl_bus.list_units()


class TestSystemctlShowProperty:
    """Tests for SystemctlManagerBus.show_property."""

    def test_returns_raw_output(self, systemctl_bus):
        output = "FragmentPath=/usr/lib/systemd/system/cron.service\n"

        with patch(RUN, return_value=completed(output)) as run:
            assert systemctl_bus.show_property('cron.service', 'FragmentPath') == output

        assert run.call_args[0][0] == ['systemctl', 'show', '-p', 'FragmentPath', '--', 'cron.service']

    def test_unit_name_not_parsed_as_option(self, systemctl_bus):
        with patch(RUN, return_value=completed("FragmentPath=\n")) as run:
            systemctl_bus.show_property('--help.service', 'FragmentPath')

        command = run.call_args[0][0]
        assert command.index('--') < command.index('--help.service')

    def test_timeout(self, systemctl_bus):
        with patch(RUN, side_effect=subprocess.TimeoutExpired(cmd='systemctl', timeout=2.0)):
            with pytest.raises(ResolveQueryError) as exc_info:
                systemctl_bus.show_property('a.service', 'FragmentPath')

        assert exc_info.value.unit_name == 'a.service'

    def test_launch_failure(self, systemctl_bus):
        with patch(RUN, side_effect=PermissionError("denied")):
            with pytest.raises(ResolveQueryError):
                systemctl_bus.show_property('a.service', 'FragmentPath')

    def test_non_zero_exit(self, systemctl_bus):
        with patch(RUN, return_value=completed(returncode=1, stderr="Failed to connect to bus")):
            with pytest.raises(ResolveQueryError, match="Failed to connect"):
                systemctl_bus.show_property('a.service', 'FragmentPath')


class FakeDBusException(Exception):
    def __init__(self, message, name="org.freedesktop.DBus.Error.Failed"):
        super().__init__(message)
        self._name = name

    def get_dbus_name(self):
        return self._name


class FakeSystemBus:
    """Bus système simulé: une liste d'unités et leurs FragmentPath."""

    instances = []

    def __init__(self, private=False):
        self.private = private
        self.closed = False
        self.units = {}
        self.list_error = None
        self.timeouts = []
        FakeSystemBus.instances.append(self)

    def get_object(self, bus_name, object_path):
        return (self, object_path)

    def close(self):
        self.closed = True


class FakeInterface:
    def __init__(self, bus_object, interface_name):
        self.bus, self.object_path = bus_object
        self.interface_name = interface_name

    def ListUnits(self, timeout=None):
        self.bus.timeouts.append(timeout)
        if self.bus.list_error is not None:
            raise self.bus.list_error
        return [unit_tuple(name) for name in self.bus.units]

    def GetUnit(self, unit_name, timeout=None):
        self.bus.timeouts.append(timeout)
        if unit_name not in self.bus.units:
            raise FakeDBusException(f"Unit {unit_name} not loaded.", NO_SUCH_UNIT_ERROR)
        return f"/org/freedesktop/systemd1/unit/{unit_name}"

    def Get(self, interface_name, property_name, timeout=None):
        self.bus.timeouts.append(timeout)
        unit_name = self.object_path.rsplit('/', 1)[-1]
        value = self.bus.units[unit_name]
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture
def fake_dbus(monkeypatch):
    """Module dbus simulé, installé dans sys.modules."""
    FakeSystemBus.instances = []
    module = types.ModuleType('dbus')
    module.SystemBus = FakeSystemBus
    module.Interface = FakeInterface
    module.exceptions = types.SimpleNamespace(DBusException=FakeDBusException)
    monkeypatch.setitem(sys.modules, 'dbus', module)
    return module


class TestDBusManagerBus:
    """Tests for DBusManagerBus against a simulated dbus module."""

    def test_connect_opens_private_bus(self, fake_dbus, logger):
        with DBusManagerBus(logger) as bus:
            assert bus.connected is True

        system_bus = FakeSystemBus.instances[0]
        assert system_bus.private is True
        assert system_bus.closed is True

    def test_missing_library(self, monkeypatch, logger):
        monkeypatch.setitem(sys.modules, 'dbus', None)

        with pytest.raises(ManagerConnectionError, match="dbus-python"):
            DBusManagerBus(logger).connect()

    def test_bus_unreachable(self, fake_dbus, logger):
        def unreachable(private=False):
            raise FakeDBusException("No such file or directory")

        fake_dbus.SystemBus = unreachable

        with pytest.raises(ManagerConnectionError):
            DBusManagerBus(logger).connect()

    def test_list_units(self, fake_dbus, logger):
        bus = DBusManagerBus(logger, timeout=3.0)
        bus.connect()
        FakeSystemBus.instances[0].units = {'a.service': '/a', 'b.timer': '/b'}

        records = bus.list_units()

        assert [record[0] for record in records] == ['a.service', 'b.timer']
        assert all(isinstance(record, tuple) and len(record) == 10 for record in records)
        assert FakeSystemBus.instances[0].timeouts == [3.0]

    def test_list_units_failure(self, fake_dbus, logger):
        bus = DBusManagerBus(logger)
        bus.connect()
        FakeSystemBus.instances[0].list_error = FakeDBusException("Access denied")

        with pytest.raises(ManagerQueryError):
            bus.list_units()

    def test_show_property(self, fake_dbus, logger):
        bus = DBusManagerBus(logger)
        bus.connect()
        FakeSystemBus.instances[0].units = {'a.service': '/etc/systemd/system/a.service'}

        output = bus.show_property('a.service', 'FragmentPath')

        assert output == "FragmentPath=/etc/systemd/system/a.service\n"

    def test_unknown_unit_gives_empty_output(self, fake_dbus, logger):
        bus = DBusManagerBus(logger)
        bus.connect()

        assert bus.show_property('ghost.service', 'FragmentPath') == ""

    def test_property_failure(self, fake_dbus, logger):
        bus = DBusManagerBus(logger)
        bus.connect()
        FakeSystemBus.instances[0].units = {'a.service': FakeDBusException("Timeout")}

        with pytest.raises(ResolveQueryError) as exc_info:
            bus.show_property('a.service', 'FragmentPath')

        assert exc_info.value.unit_name == 'a.service'


class TestCreateBusFactory:
    """Tests for create_bus_factory."""

    def test_unknown_backend(self, logger):
        with pytest.raises(ValueError, match="upstart"):
            create_bus_factory('upstart', logger)

    @pytest.mark.parametrize("backend, bus_class", [
        ('dbus', DBusManagerBus),
        ('systemctl', SystemctlManagerBus),
    ])
    def test_fresh_instance_per_call(self, logger, backend, bus_class):
        factory = create_bus_factory(backend, logger, timeout=4.0)

        first, second = factory(), factory()

        assert factory.backend_name == backend
        assert isinstance(first, bus_class)
        assert first is not second
        assert first.timeout == 4.0
