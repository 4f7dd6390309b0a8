from abc import abstractmethod

from agentlink.model import UploadCommandInfo, UploadPayload


class AgentTransport:
    """
    The commands the coordinators send to the agent. Every command is fire-and-forget:
    outcomes arrive later as messages from the agent.
    """

    @abstractmethod
    def close_serial_monitor(self, port):
        """ closes the serial monitor attached to the port, if any """
        raise NotImplementedError

    @abstractmethod
    def close_all_ports(self):
        """ closes every serial port the agent has open """
        raise NotImplementedError

    @abstractmethod
    def upload(self, payload: UploadPayload, command_info: UploadCommandInfo):
        raise NotImplementedError

    @abstractmethod
    def download_tool(self, tool, version, package, replacement):
        raise NotImplementedError
