# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

"""
Provide default logging setup for the plugin when the host does not configure logging itself
"""

LOG_DATE_FORMAT = "%m/%d/%Y %I:%M:%S %p"
LOG_FORMAT = "%(levelname)s | %(asctime)-15s | %(message)s"
CORE_LOG_FILE = "external_sns.log"

CONSOLE_HANDLER_NAME = "external_sns.console"
FILE_HANDLER_NAME = "external_sns.file"


def _replace_handler(logger: logging.Logger, handler: logging.Handler) -> None:
    # repeated calls (one per plugin instance) must not duplicate the output
    for existing in list(logger.handlers):
        if existing.get_name() == handler.get_name():
            logger.removeHandler(existing)
            existing.close()
    logger.addHandler(handler)


def init_basic_logging(log_dir: Optional[str] = None, enable_console_logging: bool = True, root_level=logging.INFO) -> logging.Logger:
    logger = logging.getLogger()
    logger.setLevel(root_level)

    if enable_console_logging:
        console = logging.StreamHandler(sys.stdout)
        console.set_name(CONSOLE_HANDLER_NAME)
        console.setLevel(root_level)
        console.setFormatter(logging.Formatter("%(asctime)s - %(name)-13s: %(levelname)-8s %(message)s"))
        _replace_handler(logger, console)

    # keeps the subscription history of previous deployments
    if log_dir:
        if not Path(log_dir).exists():
            Path(log_dir).mkdir(parents=True)
        rotating_handler = logging.handlers.RotatingFileHandler(
            filename=os.path.join(log_dir, CORE_LOG_FILE), maxBytes=1024 * 1024, backupCount=5
        )
        rotating_handler.set_name(FILE_HANDLER_NAME)
        rotating_handler.setLevel(logging.DEBUG)
        rotating_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        _replace_handler(logger, rotating_handler)

    # no-op if any of the handlers above got installed, refer
    #   https://docs.python.org/3/library/logging.html#logging.basicConfig
    logging.basicConfig(format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT, level=root_level)

    return logger
