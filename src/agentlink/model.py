"""
Value objects shared by the coordinators.
"""
from agentlink.support.mixins import CommonEqualityMixin, StringerMixin

# connectivity of the channel to the agent before any report, otherwise True or False
UNKNOWN = None

NOPE = 'NOPE'
IN_PROGRESS = 'IN_PROGRESS'
DONE = 'DONE'
ERROR = 'ERROR'


class Device(CommonEqualityMixin, StringerMixin):
    """
    A port reported by the agent. Serial devices carry a port, network devices an address.
    Any other attributes reported are kept in extra.
    """

    def __init__(self, name, is_open=False, **extra):
        self.name = name
        self.is_open = is_open
        self.extra = extra

    @classmethod
    def from_message(cls, raw: dict):
        """
        >>> Device.from_message({'Name': 'COM3', 'IsOpen': True, 'VendorID': '0x2341'}).extra
        {'VendorID': '0x2341'}
        """
        extra = {k: v for k, v in raw.items() if k not in ('Name', 'IsOpen')}
        return cls(raw.get('Name'), bool(raw.get('IsOpen', False)), **extra)


class DeviceList(CommonEqualityMixin, StringerMixin):
    """ The serial and network devices currently attached. Order is significant. """

    def __init__(self, serial=(), network=()):
        self.serial = list(serial)
        self.network = list(network)


class OperationState(CommonEqualityMixin, StringerMixin):
    """ The status of an upload or download, with the error or progress message. """

    def __init__(self, status, err=None, msg=None):
        self.status = status
        self.err = err
        self.msg = msg


class UploadCommandInfo(CommonEqualityMixin, StringerMixin):
    """ The command the agent runs to program the target. """

    def __init__(self, commandline, signature, options=None):
        self.commandline = commandline
        self.signature = signature
        self.options = dict(options or {})


class UploadPayload(CommonEqualityMixin, StringerMixin):
    """
    What is sent to the agent for an upload. The compiled artifact is available as both
    hex and data: the desktop agent reads hex, other agents read data.
    """

    def __init__(self, target: dict, commandline, filename, payload):
        self.target = dict(target)
        self.commandline = commandline
        self.filename = filename
        self.hex = payload
        self.data = payload

