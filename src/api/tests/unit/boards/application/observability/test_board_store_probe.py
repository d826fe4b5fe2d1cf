"""Unit tests for the BoardAggregateStore probe."""

from unittest.mock import MagicMock

import structlog

from boards.application.observability import DefaultBoardStoreProbe


class TestDefaultBoardStoreProbe:
    """Tests for DefaultBoardStoreProbe log records."""

    def test_creates_with_custom_logger(self):
        custom_logger = structlog.get_logger()
        probe = DefaultBoardStoreProbe(logger=custom_logger)

        assert probe._logger is custom_logger

    def test_board_created_logs_at_info(self):
        mock_logger = MagicMock()
        probe = DefaultBoardStoreProbe(logger=mock_logger)

        probe.board_created(board_id="b-1", owner_id="u-1", title="Sprint 1")

        mock_logger.info.assert_called_once_with(
            "board_created", board_id="b-1", owner_id="u-1", title="Sprint 1"
        )

    def test_mutation_rejected_logs_at_warning(self):
        mock_logger = MagicMock()
        probe = DefaultBoardStoreProbe(logger=mock_logger)

        probe.mutation_rejected(
            board_id="b-1", operation="move_item", user_id="u-1", error="Item x not found"
        )

        call_args = mock_logger.warning.call_args
        assert call_args[0][0] == "board_mutation_rejected"
        assert call_args[1]["operation"] == "move_item"
        assert call_args[1]["error"] == "Item x not found"

    def test_mutation_committed_logs_at_debug(self):
        mock_logger = MagicMock()
        probe = DefaultBoardStoreProbe(logger=mock_logger)

        probe.mutation_committed(
            board_id="b-1", operation="create_item", version=4, user_id="u-1"
        )

        mock_logger.debug.assert_called_once()
        assert mock_logger.debug.call_args[1]["version"] == 4
        mock_logger.info.assert_not_called()
