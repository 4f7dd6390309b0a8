import unittest
from unittest.mock import Mock

from hamcrest import assert_that, is_, equal_to

from agentlink.model import DONE, ERROR, IN_PROGRESS, NOPE, OperationState
from agentlink.operation import OperationTracker


class OperationTrackerTest(unittest.TestCase):

    def setUp(self):
        self.log = Mock()
        self.sut = OperationTracker('op', self.log)
        self.states = []
        self.done = []
        self.errors = []
        self.sut.state.add(self.states.append)
        self.sut.done.add(self.done.append)
        self.sut.error.add(self.errors.append)

    def statuses(self):
        return [s.status for s in self.states]

    def test_initial_state(self):
        assert_that(self.sut.status, is_(NOPE))
        assert_that(self.sut.completed, is_(False))
        assert_that(self.states, is_([OperationState(NOPE)]))

    def test_done(self):
        self.sut.begin()
        assert_that(self.sut.complete('ok'), is_(True))
        assert_that(self.statuses(), is_([NOPE, IN_PROGRESS, DONE]))
        assert_that(self.done, is_([OperationState(DONE, msg='ok')]))
        assert_that(self.errors, is_([]))

    def test_error_after_done_is_suppressed(self):
        self.sut.begin()
        self.sut.complete()
        assert_that(self.sut.fail('late'), is_(False))
        assert_that(self.errors, is_([]))
        assert_that(self.sut.status, is_(DONE))
        assert_that(self.log.warning.call_count, is_(1))

    def test_done_after_error_is_suppressed(self):
        self.sut.begin()
        self.sut.fail('broken')
        assert_that(self.sut.complete(), is_(False))
        assert_that(self.done, is_([]))
        assert_that(self.errors, is_([OperationState(ERROR, err='broken')]))
        assert_that(self.sut.status, is_(ERROR))

    def test_progress(self):
        self.sut.begin()
        in_progress = []
        self.sut.in_progress.add(in_progress.append)
        assert_that(self.sut.progress('50%'), is_(True))
        assert_that(in_progress, is_([OperationState(IN_PROGRESS, msg='50%')]))

    def test_progress_after_completion_is_ignored(self):
        self.sut.begin()
        self.sut.complete()
        assert_that(self.sut.progress('late'), is_(False))
        assert_that(self.statuses(), is_([NOPE, IN_PROGRESS, DONE]))

    def test_complete_before_begin_is_ignored(self):
        assert_that(self.sut.complete(), is_(False))
        assert_that(self.sut.progress(), is_(False))
        assert_that(self.sut.status, is_(NOPE))
        assert_that(self.done, is_([]))

    def test_fail_before_begin(self):
        assert_that(self.sut.fail('no agent'), is_(True))
        assert_that(self.errors, is_([OperationState(ERROR, err='no agent')]))

    def test_begin_rearms_outcomes(self):
        self.sut.begin()
        self.sut.complete()
        self.sut.begin()
        self.sut.fail('second')
        self.sut.begin()
        self.sut.complete('third')
        assert_that(self.done, is_([OperationState(DONE), OperationState(DONE, msg='third')]))
        assert_that(self.errors, is_([OperationState(ERROR, err='second')]))

    def test_late_subscriber_gets_outcome_of_current_session(self):
        self.sut.begin()
        self.sut.complete()
        late = []
        self.sut.done.add(late.append)
        assert_that(late, is_([OperationState(DONE)]))

        self.sut.begin()
        later = []
        self.sut.done.add(later.append)
        assert_that(later, is_([]))

    def test_state_replays_latest(self):
        self.sut.begin('starting')
        received = []
        self.sut.state.add(received.append)
        assert_that(received, is_(equal_to([OperationState(IN_PROGRESS, msg='starting')])))
