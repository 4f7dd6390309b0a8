"""
Dispatches the messages received from the agent.

Messages are mappings. The key that identifies each kind of message:

    Version             agent information
    Ports, Network      the serial (Network false) or network device list
    D                   serial monitor data
    Cmd                 serial monitor Open/Close
    ProgrammerStatus    upload progress, Flash 'Ok' when programming succeeded
    DownloadStatus      tool download progress
    Err                 an upload failure
    Error               an agent error
"""
import logging

from agentlink.devices import DeviceRegistry
from agentlink.download import DownloadCoordinator
from agentlink.model import IN_PROGRESS, Device
from agentlink.support.events import EventSource, StateStream
from agentlink.upload import UploadCoordinator

logger = logging.getLogger(__name__)

TERMINATED_BY_USER = 'terminated by user'


class MessageRouter:
    """
    Receives every agent message through app_messages, and updates the registry and
    coordinators from it.
    """

    def __init__(self, registry: DeviceRegistry, upload: UploadCoordinator, download: DownloadCoordinator,
                 agent_found: StateStream=None):
        self.registry = registry
        self.upload = upload
        self.download = download
        self.agent_info = {}
        self.agent_found = agent_found if agent_found is not None else StateStream(None)
        self.agent_errors = StateStream(None)
        self.error = self.agent_errors.distinct()
        self.serial_monitor_opened = StateStream(False)
        self.serial_monitor_messages = EventSource()
        self.serial_monitor_messages_with_port = EventSource()
        self.app_messages = EventSource()
        self.app_messages.add(self.handle_app_message)

    def receive(self, message):
        """ entry point for the transport """
        self.app_messages.fire(message)

    def handle_app_message(self, message):
        if not isinstance(message, dict):
            logger.debug("dropping message %r" % (message,))
            return
        if 'Version' in message:
            self._agent_info(message)
        if 'Ports' in message:
            self._list(message)
        if 'D' in message:
            self.serial_monitor_messages.fire(message['D'])
            self.serial_monitor_messages_with_port.fire(message)
        if message.get('Cmd') in ('Open', 'Close'):
            self.serial_monitor_opened.fire(message['Cmd'] == 'Open')
        if 'ProgrammerStatus' in message:
            self._upload_status(message)
        if 'DownloadStatus' in message:
            self._download_status(message)
        if message.get('Err'):
            self.upload.notify_error(message['Err'])
        if 'Error' in message:
            self.agent_errors.fire(message['Error'])

    def _agent_info(self, message):
        self.agent_info = dict(message)
        logger.info("agent version %s" % message['Version'])
        self.agent_found.fire(True)

    def _list(self, message):
        ports = [Device.from_message(p) for p in message['Ports'] or ()]
        if message.get('Network'):
            changed = self.registry.update_network(ports)
        else:
            changed = self.registry.update_serial(ports)
        if changed:
            logger.debug("devices changed: %s" % self.registry.devices)

    def _upload_status(self, message):
        upload = self.upload
        if upload.status != IN_PROGRESS:
            return
        status = message['ProgrammerStatus']
        if message.get('Flash') == 'Ok':
            upload.complete(message.get('Msg'))
        elif status == 'Starting':
            upload.progress('Programming with: %s' % message.get('Cmd'))
        elif status == 'Error':
            upload.fail(message.get('Msg'))
        elif status == 'Killed':
            upload.progress(TERMINATED_BY_USER)
            upload.fail(TERMINATED_BY_USER)
        else:
            upload.progress(message.get('Msg'))

    def _download_status(self, message):
        download = self.download
        if download.status != IN_PROGRESS:
            return
        status = message['DownloadStatus']
        if status == 'Success':
            download.complete(message.get('Msg'))
        elif status == 'Error':
            download.fail(message.get('Msg'))
        else:
            download.progress(message.get('Msg'))
