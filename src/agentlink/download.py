"""
Downloads tools and packages the toolchain needs, through the agent.
"""
import logging

from agentlink.model import DONE, ERROR, IN_PROGRESS, NOPE
from agentlink.operation import OperationTracker

logger = logging.getLogger(__name__)

DOWNLOAD_NOPE = NOPE
DOWNLOAD_IN_PROGRESS = IN_PROGRESS
DOWNLOAD_DONE = DONE
DOWNLOAD_ERROR = ERROR


class DownloadCoordinator(OperationTracker):

    def __init__(self, transport):
        super().__init__('download', logger)
        self.transport = transport

    def start_download(self, tool, version, package, replacement='keep'):
        """
        Asks the agent to fetch a tool.
        :param replacement: 'keep' leaves an installed copy in place, 'replace' overwrites it
        """
        self.begin()
        logger.info("downloading %s %s from %s" % (tool, version, package))
        self.transport.download_tool(tool, version, package, replacement)

    def notify_error(self, err):
        self.fail(err)
