# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from typing import Any, Dict, List, Mapping, Optional, Sequence

from external_sns.core.errors import InvalidTopicBindingError

EXTERNAL_SNS_EVENT = "externalSNS"
HTTP_EVENT = "http"

DEFAULT_PROTOCOL = "lambda"
DELIVERY_POLICY_ATTR = "DeliveryPolicy"
PROTOCOL_ATTR = "Protocol"
TOPIC_ATTR = "topic"


class CoreData:
    """Provide basic dunder implementations for the entities of the plugin"""

    def __eq__(self, other) -> bool:
        return type(other) is type(self) and self.__dict__ == other.__dict__

    def __hash__(self) -> int:
        return hash(tuple(sorted((k, repr(v)) for k, v in self.__dict__.items())))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({','.join([f'{name}={repr(value)}' for name, value in self.__dict__.items()])})"

    def __str__(self) -> str:
        return self.__repr__()


class TopicBinding(CoreData):
    """Canonical form of an 'externalSNS' event.

    Users can declare the binding either as a bare topic name::

        - externalSNS: orders

    or as an object that can also carry the subscription protocol and a delivery policy::

        - externalSNS:
            topic: orders
            Protocol: https
            DeliveryPolicy:
              numRetries: 3
    """

    def __init__(self, topic: str, protocol: str = DEFAULT_PROTOCOL, delivery_policy: Optional[Dict[str, Any]] = None) -> None:
        self.topic = topic
        self.protocol = protocol
        self.delivery_policy = delivery_policy

    @classmethod
    def parse(cls, raw_binding: Any, function_key: Optional[str] = None) -> "TopicBinding":
        if isinstance(raw_binding, TopicBinding):
            return raw_binding

        if isinstance(raw_binding, str):
            topic, protocol, delivery_policy = raw_binding, DEFAULT_PROTOCOL, None
        elif isinstance(raw_binding, Mapping):
            topic = raw_binding.get(TOPIC_ATTR, None)
            protocol = raw_binding.get(PROTOCOL_ATTR, None) or DEFAULT_PROTOCOL
            delivery_policy = raw_binding.get(DELIVERY_POLICY_ATTR, None)
        else:
            raise InvalidTopicBindingError(function_key, raw_binding, f"expected a topic name or an object, got {type(raw_binding)!r}")

        if not isinstance(topic, str) or not topic.strip():
            raise InvalidTopicBindingError(function_key, raw_binding, "topic name is missing")

        return cls(topic.strip(), protocol, delivery_policy)

    @property
    def has_delivery_policy(self) -> bool:
        return self.delivery_policy is not None


class FunctionDefinition(CoreData):
    """Read-only view of a function declared in the service configuration.

    `key` is the logical name the function is declared with, `name` is the name it is deployed with.
    """

    def __init__(self, key: str, name: str, events: Optional[Sequence[Any]] = None) -> None:
        self.key = key
        self.name = name
        self.events = list(events) if events else []

    @classmethod
    def from_config(cls, key: str, raw_definition: Mapping[str, Any], default_name: str) -> "FunctionDefinition":
        raw_definition = raw_definition or {}
        return cls(key, raw_definition.get("name", None) or default_name, raw_definition.get("events", None))

    def external_sns_events(self) -> List[Any]:
        return [event[EXTERNAL_SNS_EVENT] for event in self.events if isinstance(event, Mapping) and event.get(EXTERNAL_SNS_EVENT)]

    def topic_bindings(self) -> List[TopicBinding]:
        return [TopicBinding.parse(raw, self.key) for raw in self.external_sns_events()]

    def http_path(self) -> Optional[str]:
        """Path of the first 'http' event (if any).

        Both the object ({'path': 'orders', 'method': 'post'}) and the short ('POST orders') forms are supported.
        """
        for event in self.events:
            if isinstance(event, Mapping) and HTTP_EVENT in event:
                http = event[HTTP_EVENT]
                if isinstance(http, Mapping):
                    return http.get("path", None)
                if isinstance(http, str) and http.strip():
                    return http.split()[-1]
                return None
        return None


class SubscriptionInfo(CoreData):
    """Current linkage between a function and a topic. `subscription_arn` is None if not subscribed."""

    def __init__(
        self, function_arn: str, topic_arn: str, subscription_arn: Optional[str] = None, endpoint: Optional[str] = None
    ) -> None:
        self.function_arn = function_arn
        self.topic_arn = topic_arn
        self.subscription_arn = subscription_arn
        self.endpoint = endpoint

    @property
    def is_subscribed(self) -> bool:
        return bool(self.subscription_arn)
