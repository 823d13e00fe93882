# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
from typing import Any, Dict, Iterable, List, Optional

from external_sns.definitions.aws.common import SNS_ARN_ROOT, remote_call

logger = logging.getLogger(__name__)

SNS_RETRYABLE_ERRORS = {"InternalErrorException", "ThrottledException"}

PENDING_MARKER = "pending"
PENDING_CONFIRMATION_MARKER = "pending confirmation"


def create_topic_arn(region: str, account_id: str, topic_name: str) -> str:
    return f"{SNS_ARN_ROOT}:{region}:{account_id}:{topic_name}"


def is_pending(subscription_arn: Optional[str]) -> bool:
    """SNS reports subscriptions that are not confirmed yet with a placeholder instead of a real ARN
    (e.g 'PendingConfirmation', 'pending confirmation')."""
    return bool(subscription_arn) and PENDING_MARKER in subscription_arn.lower()


def is_pending_confirmation(subscription_arn: Optional[str]) -> bool:
    return bool(subscription_arn) and PENDING_CONFIRMATION_MARKER in subscription_arn.lower()


def list_subscriptions(sns, topic_arn: str) -> List[Dict[str, Any]]:
    """Returns all of the subscriptions on the topic, following 'NextToken' till the last page."""
    subscriptions: List[Dict[str, Any]] = []
    next_token = None
    while True:
        params = {"TopicArn": topic_arn}
        if next_token:
            params["NextToken"] = next_token
        response = remote_call(sns.list_subscriptions_by_topic, "sns:ListSubscriptionsByTopic", SNS_RETRYABLE_ERRORS, **params)
        subscriptions.extend(response.get("Subscriptions", []))

        next_token = response.get("NextToken", None)
        if not next_token:
            break
    return subscriptions


def find_subscription(sns, topic_arn: str, protocol: str, endpoints: Iterable[Optional[str]]) -> Optional[Dict[str, Any]]:
    """Find the active subscription (if any) on the topic for one of the endpoints.

    :param topic_arn: arn for SNS topic
    :param protocol: protocol used during the creation of the subscription (e.g 'lambda', 'https').
    :param endpoints: candidate resource paths/URLs/ARNs used during the creation of the subscription.
           Refer
           https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/sns/client/subscribe.html
           for possible formats of an endpoint depending on the protocol used during subscription.

    :returns the first subscription record that matches the protocol and one of the endpoints. Subscriptions pending
             confirmation are ignored.
    """
    candidates = {endpoint for endpoint in endpoints if endpoint}
    for subs in list_subscriptions(sns, topic_arn):
        if is_pending(subs.get("SubscriptionArn", "")):
            continue
        if subs.get("Protocol", None) == protocol and subs.get("Endpoint", None) in candidates:
            return subs
    return None


def subscribe(sns, topic_arn: str, protocol: str, endpoint: str) -> Optional[str]:
    """https://boto3.amazonaws.com/v1/documentation/api/latest/reference/services/sns/client/subscribe.html

    :returns the subscription ARN, or the placeholder SNS returns while the subscription is pending confirmation.
    """
    response = remote_call(
        sns.subscribe, "sns:Subscribe", SNS_RETRYABLE_ERRORS, TopicArn=topic_arn, Protocol=protocol, Endpoint=endpoint
    )
    return response.get("SubscriptionArn", None)


def unsubscribe(sns, subscription_arn: str) -> None:
    remote_call(sns.unsubscribe, "sns:Unsubscribe", SNS_RETRYABLE_ERRORS, SubscriptionArn=subscription_arn)


def set_subscription_attribute(sns, subscription_arn: str, attribute_name: str, attribute_value: str) -> Dict[str, Any]:
    return remote_call(
        sns.set_subscription_attributes,
        "sns:SetSubscriptionAttributes",
        SNS_RETRYABLE_ERRORS,
        SubscriptionArn=subscription_arn,
        AttributeName=attribute_name,
        AttributeValue=attribute_value,
    )
