"""
The coordinator between a host application and the agent.

The host application wires a transport to the daemon: messages from the agent go to
receive(), and the daemon sends commands through the AgentTransport it was built with.
"""
import logging
from typing import Callable

from agentlink.channel import ChannelMonitor
from agentlink.config.config import load_section
from agentlink.devices import DeviceRegistry, devices_list_are_equals
from agentlink.download import DownloadCoordinator
from agentlink.router import MessageRouter
from agentlink.support.events import StateStream
from agentlink.support.timer import IntervalTimer, Timer
from agentlink.transport import AgentTransport
from agentlink.upload import UploadCoordinator

logger = logging.getLogger(__name__)

BOARDS_URL = 'https://builder.arduino.cc/v3/boards'

# milliseconds between two discovery polls while the channel is open
POLLING_INTERVAL = 1500


class Daemon:
    """
    Exposes the state of the agent as streams:

    - channel_open, channel_open_status: connectivity, raw and without repeats
    - agent_found: whether the agent answered
    - devices_list: the attached serial and network devices
    - uploading, downloading: the operation state, with the one-shot
      uploading_done/uploading_error and downloading_done/downloading_error
    - serial_monitor_opened, serial_monitor_messages: the serial monitor
    - supported_boards: board metadata published by the host
    """

    def __init__(self, transport: AgentTransport, boards_url=BOARDS_URL, timer: Timer=None,
                 stop_upload_command: Callable=None, polling_interval=POLLING_INTERVAL):
        self.BOARDS_URL = boards_url
        self.POLLING_INTERVAL = polling_interval
        self.transport = transport
        self.agent_found = StateStream(None)
        self.supported_boards = StateStream([])

        self.registry = DeviceRegistry(transport)
        self.channel = ChannelMonitor(self.registry, timer or IntervalTimer(polling_interval / 1000.0),
                                      self.agent_found)
        self.upload = UploadCoordinator(transport, stop_upload_command)
        self.download = DownloadCoordinator(transport)
        self.router = MessageRouter(self.registry, self.upload, self.download, self.agent_found)

        self.channel_open = self.channel.channel_open
        self.channel_open_status = self.channel.channel_open_status
        self.devices_list = self.registry.devices_list
        self.uploading = self.upload.state
        self.uploading_done = self.upload.done
        self.uploading_error = self.upload.error
        self.upload_in_progress = self.upload.in_progress
        self.downloading = self.download.state
        self.downloading_done = self.download.done
        self.downloading_error = self.download.error
        self.app_messages = self.router.app_messages
        self.error = self.router.error
        self.serial_monitor_opened = self.router.serial_monitor_opened
        self.serial_monitor_messages = self.router.serial_monitor_messages
        self.serial_monitor_messages_with_port = self.router.serial_monitor_messages_with_port

    @classmethod
    def from_config(cls, transport: AgentTransport, directory=None, **kwargs):
        """
        Builds a daemon from the [daemon] section of the agentlink configuration.
        :param directory: where the configuration files are, defaults to the packaged configuration
        :param kwargs: constructor arguments, these take precedence over the configured values
        """
        conf = load_section('daemon', directory=directory)
        logger.debug("daemon configuration: %s" % dict(conf))
        params = dict(boards_url=conf['boards_url'], polling_interval=conf['polling_interval'])
        params.update(kwargs)
        return cls(transport, **params)

    @property
    def agent_info(self) -> dict:
        return self.router.agent_info

    @property
    def stop_upload_command(self):
        return self.upload.stop_upload_command

    @stop_upload_command.setter
    def stop_upload_command(self, command: Callable):
        self.upload.stop_upload_command = command

    devices_list_are_equals = staticmethod(devices_list_are_equals)

    def set_connectivity(self, state):
        self.channel.set_connectivity(state)

    def open_channel(self, callback: Callable):
        self.channel.open_channel(callback)

    def close_channel(self):
        self.channel.close_channel()

    def receive(self, message):
        self.router.receive(message)

    def update_devices(self, devices):
        self.registry.update_devices(devices)

    def start_upload(self, target, sketch_name, compilation_result, commandline, signature):
        return self.upload.start_upload(target, sketch_name, compilation_result, commandline, signature)

    def notify_upload_error(self, err):
        self.upload.notify_error(err)

    def stop_upload(self):
        self.upload.stop_upload()

    def start_download(self, tool, version, package, replacement='keep'):
        self.download.start_download(tool, version, package, replacement)

    def notify_download_error(self, err):
        self.download.notify_error(err)

    def close_serial_monitor(self, port):
        self.transport.close_serial_monitor(port)

    def close_all_ports(self):
        self.transport.close_all_ports()
