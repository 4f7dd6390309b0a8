import unittest
from unittest.mock import Mock

from hamcrest import assert_that, is_, equal_to

from agentlink.devices import DeviceRegistry, devices_list_are_equals, port_key
from agentlink.model import Device, DeviceList


class DevicesListAreEqualsTest(unittest.TestCase):

    def test_missing_list(self):
        assert_that(devices_list_are_equals(None, []), is_(False))
        assert_that(devices_list_are_equals([], None), is_(False))

    def test_empty_lists(self):
        assert_that(devices_list_are_equals([], []), is_(True))

    def test_different_lengths(self):
        assert_that(devices_list_are_equals([Device('COM3')], []), is_(False))

    def test_same_ports(self):
        a = [Device('COM3', True), Device('COM4', False)]
        b = [Device('COM3', True), Device('COM4', False)]
        assert_that(devices_list_are_equals(a, b), is_(True))

    def test_open_state_differs(self):
        assert_that(devices_list_are_equals([Device('COM3', True)], [Device('COM3', False)]), is_(False))

    def test_name_differs(self):
        assert_that(devices_list_are_equals([Device('COM3', True)], [Device('COM5', True)]), is_(False))

    def test_order_sensitive(self):
        a = [Device('COM3', True), Device('COM4', False)]
        b = [Device('COM4', False), Device('COM3', True)]
        assert_that(devices_list_are_equals(a, b), is_(False))


class DeviceRegistryTest(unittest.TestCase):

    def setUp(self):
        self.transport = Mock()
        self.sut = DeviceRegistry(self.transport)
        self.received = []
        self.sut.devices_list.add(self.received.append)

    def test_starts_empty(self):
        assert_that(self.sut.devices, is_(equal_to(DeviceList())))
        assert_that(self.received, is_([DeviceList()]))

    def test_update_devices_publishes_unconditionally(self):
        devices = DeviceList([Device('COM3')])
        self.sut.update_devices(devices)
        self.sut.update_devices(devices)
        assert_that(self.received, is_([DeviceList(), devices, devices]))

    def test_closes_all_ports_once_when_serial_ports_first_seen(self):
        self.sut.update_devices(DeviceList(network=[Device('board.local')]))
        self.transport.close_all_ports.assert_not_called()

        self.sut.update_devices(DeviceList([Device('COM3')]))
        self.sut.reset()
        self.sut.update_devices(DeviceList([Device('COM4')]))
        self.transport.close_all_ports.assert_called_once_with()

    def test_update_serial_keeps_network(self):
        network = [Device('board.local', address='10.0.0.2')]
        self.sut.update_devices(DeviceList(network=network))
        assert_that(self.sut.update_serial([Device('COM3')]), is_(True))
        assert_that(self.sut.devices, is_(equal_to(DeviceList([Device('COM3')], network))))

    def test_update_serial_unchanged_is_not_published(self):
        self.sut.update_serial([Device('COM3')])
        del self.received[:]
        assert_that(self.sut.update_serial([Device('COM3')]), is_(False))
        assert_that(self.received, is_([]))

    def test_update_network_keeps_serial(self):
        self.sut.update_serial([Device('COM3')])
        assert_that(self.sut.update_network([Device('board.local')]), is_(True))
        assert_that(self.sut.devices, is_(equal_to(DeviceList([Device('COM3')], [Device('board.local')]))))

    def test_update_network_reordered_is_published(self):
        self.sut.update_network([Device('a'), Device('b')])
        assert_that(self.sut.update_network([Device('b'), Device('a')]), is_(True))

    def test_reset(self):
        self.sut.update_serial([Device('COM3')])
        self.sut.reset()
        assert_that(self.sut.devices, is_(equal_to(DeviceList())))


class DevicesListAreEqualsRawPortsTest(unittest.TestCase):

    def test_same_raw_ports(self):
        a = [{'Name': 'COM3', 'IsOpen': True}, {'Name': 'COM4', 'IsOpen': False}]
        b = [{'Name': 'COM3', 'IsOpen': True}, {'Name': 'COM4', 'IsOpen': False}]
        assert_that(devices_list_are_equals(a, b), is_(True))

    def test_raw_open_state_differs(self):
        a = [{'Name': 'COM3', 'IsOpen': True}, {'Name': 'COM4', 'IsOpen': False}]
        b = [{'Name': 'COM3', 'IsOpen': True}, {'Name': 'COM4', 'IsOpen': True}]
        assert_that(devices_list_are_equals(a, b), is_(False))

    def test_raw_ports_ignore_other_keys(self):
        a = [{'Name': 'COM3', 'IsOpen': True, 'SerialNumber': '1'}]
        b = [{'Name': 'COM3', 'IsOpen': True, 'SerialNumber': '2'}]
        assert_that(devices_list_are_equals(a, b), is_(True))

    def test_raw_port_against_device(self):
        raw = [{'Name': 'COM3', 'IsOpen': True}, {'Name': 'COM4'}]
        devices = [Device('COM3', True), Device('COM4', False)]
        assert_that(devices_list_are_equals(raw, devices), is_(True))
        assert_that(devices_list_are_equals(devices, raw), is_(True))
        assert_that(devices_list_are_equals(raw, [Device('COM3', False), Device('COM4')]), is_(False))

    def test_port_key(self):
        assert_that(port_key({'Name': 'COM3', 'IsOpen': True}), is_(('COM3', True)))
        assert_that(port_key({'Name': 'COM3'}), is_(('COM3', False)))
        assert_that(port_key(Device('COM3', True, SerialNumber='1')), is_(('COM3', True)))
