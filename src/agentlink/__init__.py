"""
agentlink coordinates a host application with a locally running agent process that
programs attached boards.

- support.events: EventSource (no replay), StateStream (replays the latest value),
  OutcomeLatch (one-shot per session)
- ChannelMonitor: tracks connectivity of the channel to the agent. While open, a
  cancellable timer polls for devices. When closed, device state is reset.
- DeviceRegistry: the attached serial and network devices.
- UploadCoordinator, DownloadCoordinator: the state of the upload or download in
  progress, NOPE -> IN_PROGRESS -> DONE or ERROR.
- MessageRouter: dispatches the messages received from the agent.
- Daemon: composes all of the above for the host application.

The socket to the agent is not part of this package. The host implements
AgentTransport to send commands, and passes received messages to Daemon.receive().

## Threading

State changes happen on the thread that delivers them. The only background thread
is the one the IntervalTimer runs the polling callback on; cancelling the timer wakes
that thread and no further callback is made.
"""
