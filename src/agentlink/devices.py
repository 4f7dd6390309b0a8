"""
The devices attached to the agent.
"""
import logging

from agentlink.model import Device, DeviceList
from agentlink.support.events import StateStream

logger = logging.getLogger(__name__)


def port_key(device):
    """
    The identity and open state of a port, from a Device or a port as the agent reports it.

    >>> port_key({'Name': 'COM3', 'IsOpen': True}) == port_key(Device('COM3', True))
    True
    """
    if isinstance(device, dict):
        return device.get('Name'), bool(device.get('IsOpen', False))
    return device.name, device.is_open


def devices_list_are_equals(a, b) -> bool:
    """
    Compares two device lists, checking they contain the same ports in the same order.
    Ports are compared on name and open state only, see port_key.
    :param a: the first list
    :param b: the second list
    :return: False if either list is None, the lengths differ or any position differs.
    """
    if a is None or b is None or len(a) != len(b):
        return False
    return all(port_key(x) == port_key(y) for x, y in zip(a, b))


class DeviceRegistry:
    """
    Holds the current serial and network device lists in the devices_list stream.

    The first time the serial list is not empty, every serial port is closed through the
    transport, to release ports a previous session left open. This happens at most once.
    """

    def __init__(self, transport):
        self.transport = transport
        self.devices_list = StateStream(DeviceList())
        self._ports_closed = False
        self.devices_list.add(self._close_ports_on_startup)

    @property
    def devices(self) -> DeviceList:
        return self.devices_list.value

    def update_devices(self, devices: DeviceList):
        """ replaces the device lists. Subscribers are always notified. """
        self.devices_list.fire(devices)

    def update_serial(self, ports):
        """
        Replaces the serial list, keeping the network list.
        :return: True if the list changed and was published
        """
        current = self.devices
        if devices_list_are_equals(current.serial, ports):
            return False
        self.update_devices(DeviceList(ports, current.network))
        return True

    def update_network(self, ports):
        """
        Replaces the network list, keeping the serial list.
        :return: True if the list changed and was published
        """
        current = self.devices
        if devices_list_are_equals(current.network, ports):
            return False
        self.update_devices(DeviceList(current.serial, ports))
        return True

    def reset(self):
        self.update_devices(DeviceList())

    def _close_ports_on_startup(self, devices: DeviceList):
        if self._ports_closed or not devices.serial:
            return
        self._ports_closed = True
        self.devices_list.remove(self._close_ports_on_startup)
        logger.info("closing all serial ports left open by a previous session")
        self.transport.close_all_ports()
