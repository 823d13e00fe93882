# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

"""Reconciliation of the subscriptions between the functions of a service and the external SNS topics they declare.

All of the actions here are idempotent. They observe the current state of the topic before making any mutating call,
so running them again (e.g on every deployment) does not create duplicate subscriptions.
"""

import json
import logging
import time
from enum import Enum, unique
from typing import Any, Dict, Optional, Union

from external_sns.core.context import DeploymentContext
from external_sns.core.endpoint import get_function_endpoint
from external_sns.core.entity import DEFAULT_PROTOCOL, DELIVERY_POLICY_ATTR, CoreData, FunctionDefinition, SubscriptionInfo, TopicBinding
from external_sns.core.errors import FunctionNotFoundError
from external_sns.definitions.aws.aws_lambda.client_wrapper import get_lambda_arn
from external_sns.definitions.aws.common import get_aws_account_id_from_arn, get_aws_region_from_arn
from external_sns.definitions.aws.sns.client_wrapper import (
    create_topic_arn,
    find_subscription,
    is_pending_confirmation,
    set_subscription_attribute,
    subscribe,
    unsubscribe,
)

logger = logging.getLogger(__name__)

EMPTY_SUBSCRIPTION_ARN_MESSAGE = "Subscription ARN was empty"


@unique
class ActionOutcome(str, Enum):
    SKIPPED = "SKIPPED"
    ALREADY_SUBSCRIBED = "ALREADY_SUBSCRIBED"
    SUBSCRIBED = "SUBSCRIBED"
    PENDING = "PENDING"
    NOT_SUBSCRIBED = "NOT_SUBSCRIBED"
    UNSUBSCRIBED = "UNSUBSCRIBED"


class ActionResult(CoreData):
    def __init__(self, function_key: str, topic: str, outcome: ActionOutcome, subscription_arn: Optional[str] = None) -> None:
        self.function_key = function_key
        self.topic = topic
        self.outcome = outcome
        self.subscription_arn = subscription_arn


class SubscriptionAttribute(CoreData):
    def __init__(self, name: str, value: Any) -> None:
        self.name = name
        self.value = value

    @classmethod
    def delivery_policy(cls, policy: Dict[str, Any]) -> "SubscriptionAttribute":
        return cls(DELIVERY_POLICY_ATTR, policy)

    def serialize(self) -> str:
        if self.name == DELIVERY_POLICY_ATTR:
            return json.dumps({"healthyRetryPolicy": self.value})
        return self.value if isinstance(self.value, str) else json.dumps(self.value)


def resolve_subscription(
    context: DeploymentContext,
    function_def: FunctionDefinition,
    topic_name: str,
    protocol: str = DEFAULT_PROTOCOL,
    endpoint: Optional[str] = None,
) -> SubscriptionInfo:
    """Current linkage between the function and the topic.

    The topic is assumed to be in the same account and region as the function. An existing subscription matches if
    it uses the same protocol and its endpoint is either 'endpoint' or the function ARN. Subscriptions pending
    confirmation are not considered to be active.
    """
    function_arn = get_lambda_arn(context.lambda_client, function_def.name)
    if not function_arn:
        raise FunctionNotFoundError(function_def.name)

    region = get_aws_region_from_arn(function_arn)
    account_id = get_aws_account_id_from_arn(function_arn)
    topic_arn = create_topic_arn(region, account_id, topic_name)

    logger.info("Function ARN: %s", function_arn)
    logger.info("Topic ARN: %s", topic_arn)

    existing = find_subscription(context.sns, topic_arn, protocol, [endpoint, function_arn]) or {}
    return SubscriptionInfo(function_arn, topic_arn, existing.get("SubscriptionArn", None), existing.get("Endpoint", None))


def set_subscription_attributes(
    context: DeploymentContext, subscription_arn: Optional[str], attribute: SubscriptionAttribute
) -> Union[str, Dict[str, Any]]:
    if not subscription_arn:
        return EMPTY_SUBSCRIPTION_ARN_MESSAGE
    return set_subscription_attribute(context.sns, subscription_arn, attribute.name, attribute.serialize())


def subscribe_function(
    context: DeploymentContext, function_key: str, function_def: FunctionDefinition, binding: Union[TopicBinding, str, Dict[str, Any]]
) -> ActionResult:
    binding = TopicBinding.parse(binding, function_key)
    attribute = SubscriptionAttribute.delivery_policy(binding.delivery_policy) if binding.has_delivery_policy else None

    if context.no_deploy:
        logger.info("Not subscribing %s to %s because of the noDeploy flag", function_def.name, binding.topic)
        return ActionResult(function_key, binding.topic, ActionOutcome.SKIPPED)

    logger.info("Need to subscribe %s to %s", function_def.name, binding.topic)

    http_endpoint = get_function_endpoint(context, function_def)
    info = resolve_subscription(context, function_def, binding.topic, binding.protocol, http_endpoint)
    endpoint = http_endpoint or info.function_arn

    if info.is_subscribed:
        logger.info("Function %s is already subscribed to %s", info.function_arn, info.topic_arn)
        if attribute:
            logger.info("Setting subscription attributes")
            set_subscription_attributes(context, info.subscription_arn, attribute)
        return ActionResult(function_key, binding.topic, ActionOutcome.ALREADY_SUBSCRIBED, info.subscription_arn)

    subscription_arn = subscribe(context.sns, info.topic_arn, binding.protocol, endpoint)
    logger.info("Function %s is now subscribed to %s", info.function_arn, info.topic_arn)

    if is_pending_confirmation(subscription_arn):
        if not attribute:
            logger.info("Subscription of %s to %s is pending confirmation", info.function_arn, info.topic_arn)
            return ActionResult(function_key, binding.topic, ActionOutcome.PENDING)

        delay = context.conf.pending_confirmation_delay
        logger.info("Subscription is pending, retrying in %s seconds", delay)
        time.sleep(delay)
        new_info = resolve_subscription(context, function_def, binding.topic, binding.protocol, http_endpoint)
        logger.info("Setting subscription attributes on: %s", new_info.subscription_arn)
        set_subscription_attributes(context, new_info.subscription_arn, attribute)
        outcome = ActionOutcome.SUBSCRIBED if new_info.is_subscribed else ActionOutcome.PENDING
        return ActionResult(function_key, binding.topic, outcome, new_info.subscription_arn)

    if attribute:
        logger.info("Setting subscription attributes")
        set_subscription_attributes(context, subscription_arn, attribute)
    return ActionResult(function_key, binding.topic, ActionOutcome.SUBSCRIBED, subscription_arn)


def unsubscribe_function(
    context: DeploymentContext, function_key: str, function_def: FunctionDefinition, binding: Union[TopicBinding, str, Dict[str, Any]]
) -> ActionResult:
    binding = TopicBinding.parse(binding, function_key)
    logger.info("Need to unsubscribe %s from %s", function_def.name, binding.topic)

    http_endpoint = get_function_endpoint(context, function_def)
    info = resolve_subscription(context, function_def, binding.topic, binding.protocol, http_endpoint)
    if not info.is_subscribed:
        logger.info("Function %s is not subscribed to %s", info.function_arn, info.topic_arn)
        return ActionResult(function_key, binding.topic, ActionOutcome.NOT_SUBSCRIBED)

    unsubscribe(context.sns, info.subscription_arn)
    logger.info(
        "Function %s is no longer subscribed to %s (deleted %s)", info.function_arn, info.topic_arn, info.subscription_arn
    )
    return ActionResult(function_key, binding.topic, ActionOutcome.UNSUBSCRIBED, info.subscription_arn)


def get_info(
    context: DeploymentContext, function_key: str, function_def: FunctionDefinition, binding: Union[TopicBinding, str, Dict[str, Any]]
) -> ActionResult:
    """Read-only report of the subscription state of a binding."""
    binding = TopicBinding.parse(binding, function_key)
    http_endpoint = get_function_endpoint(context, function_def)
    info = resolve_subscription(context, function_def, binding.topic, binding.protocol, http_endpoint)
    if info.is_subscribed:
        logger.info("%s -> %s (%s): %s", function_def.name, info.topic_arn, binding.protocol, info.subscription_arn)
        return ActionResult(function_key, binding.topic, ActionOutcome.SUBSCRIBED, info.subscription_arn)

    logger.info("%s -> %s (%s): not subscribed", function_def.name, info.topic_arn, binding.protocol)
    return ActionResult(function_key, binding.topic, ActionOutcome.NOT_SUBSCRIBED)
