# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from enum import Enum, unique
from typing import Any, Dict, Mapping, Optional, Type

import boto3

logger = logging.getLogger(__name__)

DEFAULT_STAGE = "dev"
PENDING_CONFIRMATION_DELAY_IN_SECS = 10


@unique
class PluginParams(str, Enum):
    BOTO_SESSION = "AWS_BOTO_SESSION"
    REGION = "AWS_REGION"
    STAGE = "STAGE"
    NO_DEPLOY = "NO_DEPLOY"
    API_GATEWAY_NAME = "API_GATEWAY_NAME"
    PENDING_CONFIRMATION_DELAY = "PENDING_CONFIRMATION_DELAY_IN_SECS"
    LOG_DIR = "LOG_DIR"


class PluginConfiguration:
    """Options the host passes to the plugin (stage, region, 'noDeploy') along with the AWS session to be used.

    Create it either from the raw host options::

        PluginConfiguration.from_options({"stage": "prod", "region": "eu-west-1", "noDeploy": False})

    or programmatically::

        PluginConfiguration.builder().with_stage("prod").with_region("eu-west-1").build()
    """

    class _Builder:
        def __init__(self, conf_class: Type["PluginConfiguration"]) -> None:
            self._new_conf: PluginConfiguration = conf_class()

        def with_stage(self, stage: str) -> "PluginConfiguration._Builder":
            self._new_conf.add_param(PluginParams.STAGE, stage)
            return self

        def with_region(self, region: str) -> "PluginConfiguration._Builder":
            self._new_conf.add_param(PluginParams.REGION, region)
            return self

        def with_no_deploy(self, no_deploy: bool = True) -> "PluginConfiguration._Builder":
            self._new_conf.add_param(PluginParams.NO_DEPLOY, bool(no_deploy))
            return self

        def with_session(self, session: boto3.Session) -> "PluginConfiguration._Builder":
            self._new_conf.add_param(PluginParams.BOTO_SESSION, session)
            return self

        def with_api_name(self, api_name: str) -> "PluginConfiguration._Builder":
            self._new_conf.add_param(PluginParams.API_GATEWAY_NAME, api_name)
            return self

        def with_log_dir(self, log_dir: str) -> "PluginConfiguration._Builder":
            self._new_conf.add_param(PluginParams.LOG_DIR, log_dir)
            return self

        def with_param(self, key: str, value: Any) -> "PluginConfiguration._Builder":
            self._new_conf.add_param(key, value)
            return self

        def build(self) -> "PluginConfiguration":
            return self._new_conf

    @classmethod
    def builder(cls) -> _Builder:
        return PluginConfiguration._Builder(cls)

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]]) -> "PluginConfiguration":
        options = options or {}
        builder = cls.builder().with_no_deploy(bool(options.get("noDeploy", False)))
        if options.get("stage", None):
            builder.with_stage(options["stage"])
        if options.get("logDir", None):
            builder.with_log_dir(options["logDir"])
        if options.get("region", None):
            builder.with_region(options["region"])
        return builder.build()

    def __init__(self) -> None:
        self._params: Dict[str, Any] = dict()

    def get_param(self, key: str, default: Any = None) -> Any:
        return self._params.get(key, default)

    def add_param(self, key: str, value: Any) -> None:
        self._params[key] = value

    def remove_param(self, key: str) -> None:
        self._params.pop(key, None)

    @property
    def stage(self) -> str:
        return self.get_param(PluginParams.STAGE, DEFAULT_STAGE)

    @property
    def region(self) -> Optional[str]:
        return self.get_param(PluginParams.REGION)

    @property
    def no_deploy(self) -> bool:
        return bool(self.get_param(PluginParams.NO_DEPLOY, False))

    @property
    def pending_confirmation_delay(self) -> float:
        return self.get_param(PluginParams.PENDING_CONFIRMATION_DELAY, PENDING_CONFIRMATION_DELAY_IN_SECS)

    @property
    def log_dir(self) -> Optional[str]:
        return self.get_param(PluginParams.LOG_DIR)

    def __repr__(self) -> str:
        params = {k: v for k, v in self._params.items() if k != PluginParams.BOTO_SESSION}
        return f"{self.__class__.__name__}({params!r})"
