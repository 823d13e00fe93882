# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Any, Callable, List

from external_sns.core.context import DeploymentContext
from external_sns.core.entity import FunctionDefinition, TopicBinding
from external_sns.core.errors import ActionFailure, ExternalSNSError, ReconciliationError

logger = logging.getLogger(__name__)

BindingAction = Callable[[DeploymentContext, str, FunctionDefinition, TopicBinding], Any]


def for_each_binding(context: DeploymentContext, action: BindingAction) -> List[Any]:
    """Call 'action' for each 'externalSNS' event of each function of the service, in the order the events are
    declared within a function.

    Actions run one after the other. A plugin error raised by an action (e.g a failed AWS call or a malformed binding)
    does not stop the iteration; it is logged and all of them are raised at the end as a single
    :class:`ReconciliationError`. Any other exception propagates immediately.

    :returns the results of the actions, in the order they were called.
    """
    results: List[Any] = []
    failures: List[ActionFailure] = []
    for function_key, function_def in context.functions().items():
        for raw_binding in function_def.external_sns_events():
            topic = raw_binding if isinstance(raw_binding, str) else repr(raw_binding)
            try:
                binding = TopicBinding.parse(raw_binding, function_key)
                topic = binding.topic
                results.append(action(context, function_key, function_def, binding))
            except ExternalSNSError as error:
                logger.error("externalSNS action %r failed for %r -> %r! Error: %s", _name_of(action), function_key, topic, error)
                failures.append(ActionFailure(function_key, topic, error))

    if failures:
        raise ReconciliationError(failures)
    return results


def _name_of(action: BindingAction) -> str:
    return action.__name__ if hasattr(action, "__name__") else str(action)
