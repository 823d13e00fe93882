# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from ._logging_config import init_basic_logging
from .core.configuration import PluginConfiguration, PluginParams
from .core.context import DeploymentContext, ServiceDefinition
from .core.entity import FunctionDefinition, SubscriptionInfo, TopicBinding
from .core.errors import (
    ExternalSNSError,
    FunctionNotFoundError,
    InvalidTopicBindingError,
    ReconciliationError,
    RemoteOperationError,
)
from .core.events import for_each_binding
from .core.permission import add_event_permission, build_permission, normalize, normalize_topic_name, permission_resource_id
from .core.subscription import (
    ActionOutcome,
    ActionResult,
    SubscriptionAttribute,
    get_info,
    resolve_subscription,
    set_subscription_attributes,
    subscribe_function,
    unsubscribe_function,
)
from .plugin import ExternalSNSPlugin
