# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
import logging.handlers
import os

import pytest

from external_sns._logging_config import CONSOLE_HANDLER_NAME, CORE_LOG_FILE, FILE_HANDLER_NAME, init_basic_logging
from external_sns.core.context import ServiceDefinition
from external_sns.plugin import ExternalSNSPlugin


class TestLoggingConfig:
    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for handler in list(root.handlers):
            if handler not in handlers:
                root.removeHandler(handler)
                handler.close()
        root.setLevel(level)

    @staticmethod
    def _installed(name):
        return [h for h in logging.getLogger().handlers if h.get_name() == name]

    def test_init_basic_logging_console_only(self):
        logger = init_basic_logging()

        assert logger is logging.getLogger()
        assert logger.level == logging.INFO
        assert len(self._installed(CONSOLE_HANDLER_NAME)) == 1
        assert self._installed(FILE_HANDLER_NAME) == []

    def test_init_basic_logging_with_log_dir(self, tmp_path):
        log_dir = str(tmp_path / "logs")

        init_basic_logging(log_dir)
        logging.getLogger("external_sns.test").info("Function A is now subscribed to B")

        file_handlers = self._installed(FILE_HANDLER_NAME)
        assert len(file_handlers) == 1
        assert isinstance(file_handlers[0], logging.handlers.RotatingFileHandler)
        file_handlers[0].flush()
        with open(os.path.join(log_dir, CORE_LOG_FILE)) as log_file:
            assert "Function A is now subscribed to B" in log_file.read()

    def test_init_basic_logging_does_not_duplicate_handlers(self, tmp_path):
        init_basic_logging(str(tmp_path))
        init_basic_logging(str(tmp_path))

        assert len(self._installed(CONSOLE_HANDLER_NAME)) == 1
        assert len(self._installed(FILE_HANDLER_NAME)) == 1

    def test_plugin_sets_up_logging_for_log_dir(self, tmp_path):
        ExternalSNSPlugin(ServiceDefinition("svc"), {"stage": "dev", "logDir": str(tmp_path)})

        assert len(self._installed(CONSOLE_HANDLER_NAME)) == 1
        assert len(self._installed(FILE_HANDLER_NAME)) == 1
        assert os.path.exists(os.path.join(str(tmp_path), CORE_LOG_FILE))

    def test_plugin_leaves_logging_to_host_by_default(self):
        ExternalSNSPlugin(ServiceDefinition("svc"), {"stage": "dev"})

        assert self._installed(CONSOLE_HANDLER_NAME) == []
        assert self._installed(FILE_HANDLER_NAME) == []
