# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, Optional

from external_sns._logging_config import init_basic_logging
from external_sns.core.configuration import PluginConfiguration
from external_sns.core.context import DeploymentContext, ServiceDefinition
from external_sns.core.events import BindingAction, for_each_binding
from external_sns.core.permission import add_event_permission
from external_sns.core.subscription import get_info, subscribe_function, unsubscribe_function

logger = logging.getLogger(__name__)

SUBSCRIBE_COMMAND = "subscribeExternalSNS"
UNSUBSCRIBE_COMMAND = "unsubscribeExternalSNS"


class ExternalSNSPlugin:
    """Entry point registered with the host deployment tool.

    Exposes the lifecycle 'hooks' the plugin reacts to and the standalone 'commands' it adds to the host. Each hook
    runs with a new :class:`DeploymentContext`, nothing is carried over from one hook to the next.
    """

    COMMANDS: Dict[str, Dict[str, Any]] = {
        SUBSCRIBE_COMMAND: {
            "usage": "Adds subscriptions to any SNS Topics defined by externalSNS.",
            "lifecycleEvents": ["subscribe"],
        },
        UNSUBSCRIBE_COMMAND: {
            "usage": "Removes subscriptions to any SNS Topics defined by externalSNS.",
            "lifecycleEvents": ["unsubscribe"],
        },
    }

    def __init__(
        self, service: ServiceDefinition, options: Optional[Mapping[str, Any]] = None, conf: Optional[PluginConfiguration] = None
    ) -> None:
        self._service = service
        self._conf = conf if conf is not None else PluginConfiguration.from_options(options)
        if self._conf.log_dir:
            init_basic_logging(self._conf.log_dir)

        self.hooks: Dict[str, Callable[[], List[Any]]] = {
            "info:info": partial(self._loop_events, get_info),
            "deploy:compileEvents": partial(self._loop_events, add_event_permission),
            "deploy:deploy": partial(self._loop_events, subscribe_function),
            "before:remove:remove": partial(self._loop_events, unsubscribe_function),
            f"{SUBSCRIBE_COMMAND}:subscribe": partial(self._loop_events, subscribe_function),
            f"{UNSUBSCRIBE_COMMAND}:unsubscribe": partial(self._loop_events, unsubscribe_function),
        }
        self.commands: Dict[str, Dict[str, Any]] = {name: dict(command) for name, command in self.COMMANDS.items()}

    @property
    def service(self) -> ServiceDefinition:
        return self._service

    @property
    def conf(self) -> PluginConfiguration:
        return self._conf

    def new_context(self) -> DeploymentContext:
        return DeploymentContext(self._service, self._conf)

    def run_hook(self, event: str) -> List[Any]:
        if event not in self.hooks:
            raise KeyError(f"{self.__class__.__name__} does not handle lifecycle event {event!r}! Supported: {list(self.hooks.keys())}")
        logger.debug("Running %r for service %r (%r)", event, self._service.service, self._conf)
        return self.hooks[event]()

    def _loop_events(self, action: BindingAction) -> List[Any]:
        return for_each_binding(self.new_context(), action)
