"""Unit tests for Boards infrastructure probes."""

from unittest.mock import MagicMock

import structlog

from boards.infrastructure.observability import (
    DefaultBoardLockProbe,
    DefaultBoardRepositoryProbe,
    DefaultChangePropagatorProbe,
)


class TestBoardRepositoryProbe:
    def test_default_probe_accepts_custom_logger(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultBoardRepositoryProbe(logger=mock_logger)

        assert probe._logger is mock_logger

    def test_board_saved_logs_info(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultBoardRepositoryProbe(logger=mock_logger)

        probe.board_saved(board_id="b-1", version=3)

        mock_logger.info.assert_called_once_with(
            "board_saved", board_id="b-1", version=3
        )

    def test_version_conflict_logs_warning(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultBoardRepositoryProbe(logger=mock_logger)

        probe.version_conflict(board_id="b-1", expected=2, actual=3)

        mock_logger.warning.assert_called_once_with(
            "board_version_conflict", board_id="b-1", expected=2, actual=3
        )


class TestBoardLockProbe:
    def test_lock_acquired_logs_debug_with_rounded_wait(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultBoardLockProbe(logger=mock_logger)

        probe.lock_acquired(board_id="b-1", waited_seconds=0.123456)

        mock_logger.debug.assert_called_once_with(
            "board_lock_acquired", board_id="b-1", waited_seconds=0.1235
        )

    def test_lock_timed_out_logs_warning(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultBoardLockProbe(logger=mock_logger)

        probe.lock_timed_out(board_id="b-1", timeout=5.0)

        mock_logger.warning.assert_called_once_with(
            "board_lock_timed_out", board_id="b-1", timeout=5.0
        )


class TestChangePropagatorProbe:
    def test_event_dropped_logs_warning(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultChangePropagatorProbe(logger=mock_logger)

        probe.event_dropped(
            board_id="b-1", subscriber_id="slow", operation="move_item", version=9
        )

        mock_logger.warning.assert_called_once_with(
            "board_change_dropped",
            board_id="b-1",
            subscriber_id="slow",
            operation="move_item",
            version=9,
        )

    def test_board_closed_logs_info(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultChangePropagatorProbe(logger=mock_logger)

        probe.board_closed(board_id="b-1", subscribers=2)

        mock_logger.info.assert_called_once_with(
            "board_subscriptions_closed", board_id="b-1", subscribers=2
        )
