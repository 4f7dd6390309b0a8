"""
Uploads a compiled sketch to a target through the agent.
"""
import logging
from typing import Callable

from agentlink.errors import UnsupportedOperationError
from agentlink.model import DONE, ERROR, IN_PROGRESS, NOPE, UploadCommandInfo, UploadPayload
from agentlink.operation import OperationTracker

logger = logging.getLogger(__name__)

UPLOAD_NOPE = NOPE
UPLOAD_IN_PROGRESS = IN_PROGRESS
UPLOAD_DONE = DONE
UPLOAD_ERROR = ERROR

PROJECT_NAME_TOKEN = '{build.project_name}'
DEFAULT_EXTENSION = 'bin'

# options sent with every upload command
UPLOAD_OPTIONS = {
    'use_1200bps_touch': True,
    'wait_for_upload_port': True
}


def artifact_extension(commandline, compilation_result) -> str:
    """
    Finds the extension of the file the command programs: the 3 characters after the
    '.' that follows {build.project_name}. Falls back to 'bin' when there is no token, or
    the compilation result has no artifact with that extension.

    >>> artifact_extension('"-Uflash:w:{build.path}/{build.project_name}.hex:i"', {'hex': b'1'})
    'hex'
    >>> artifact_extension('bossac {build.path}/{build.project_name}.bin', {'hex': b'1'})
    'bin'
    """
    index = commandline.find(PROJECT_NAME_TOKEN) if commandline else -1
    ext = None
    if index >= 0:
        start = index + len(PROJECT_NAME_TOKEN) + 1
        ext = commandline[start:start + 3]
    if not ext or not compilation_result.get(ext):
        logger.warning("no artifact for extension '%s' in the command line, defaulting to %s"
                       % (ext, DEFAULT_EXTENSION))
        ext = DEFAULT_EXTENSION
    return ext


class UploadCoordinator(OperationTracker):
    """
    Tracks a single upload at a time. The agent reports progress and the outcome
    asynchronously; they are fed in by the MessageRouter or notify_error().

    :param transport: the AgentTransport commands are sent to
    :param stop_upload_command: a callable that interrupts the upload in progress, for hosts
        that can do so. Without it, stop_upload() raises UnsupportedOperationError.
    """

    def __init__(self, transport, stop_upload_command: Callable=None):
        super().__init__('upload', logger)
        self.transport = transport
        self.stop_upload_command = stop_upload_command

    def start_upload(self, target: dict, sketch_name, compilation_result: dict, commandline, signature):
        """
        Uploads a sketch to a serial or network target.
        :param target: describes the target, including the port to program
        :param sketch_name: the base name of the file uploaded
        :param compilation_result: the compiled artifacts keyed by file extension
        :param commandline: the command template the agent runs
        :param signature: the signature of the command line
        :return: the payload dispatched
        """
        self.begin()
        self.transport.close_serial_monitor(target.get('port'))

        command_info = UploadCommandInfo(commandline, signature, UPLOAD_OPTIONS)
        ext = artifact_extension(commandline, compilation_result)
        payload = UploadPayload(target, commandline, '%s.%s' % (sketch_name, ext), compilation_result.get(ext))

        logger.info("uploading %s to %s" % (payload.filename, target.get('port')))
        self.transport.upload(payload, command_info)
        return payload

    def notify_error(self, err):
        """ reports an upload failure signalled by the transport """
        self.fail(err)

    def stop_upload(self):
        """
        Interrupts the upload in progress.
        :raises UnsupportedOperationError: when the host cannot interrupt uploads
        """
        if self.stop_upload_command is None:
            raise UnsupportedOperationError("stop upload is not supported by this agent")
        self.stop_upload_command()
