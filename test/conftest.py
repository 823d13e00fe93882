# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging

import pytest


# progress of the actions is reported at INFO level, make it visible to the tests asserting on it.
@pytest.fixture(autouse=True)
def external_sns_logs(caplog):
    caplog.set_level(logging.INFO, logger="external_sns")
    yield caplog
