# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest

from external_sns.core.entity import FunctionDefinition, SubscriptionInfo, TopicBinding
from external_sns.core.errors import InvalidTopicBindingError


class TestTopicBinding:
    def test_topic_binding_string_and_object_forms_are_equivalent(self):
        assert TopicBinding.parse("orders") == TopicBinding.parse({"topic": "orders"})
        assert TopicBinding.parse("orders") == TopicBinding("orders", "lambda", None)

    def test_topic_binding_object_form(self):
        binding = TopicBinding.parse({"topic": "orders", "Protocol": "https", "DeliveryPolicy": {"numRetries": 3}})
        assert binding.topic == "orders"
        assert binding.protocol == "https"
        assert binding.delivery_policy == {"numRetries": 3}
        assert binding.has_delivery_policy

    def test_topic_binding_defaults(self):
        binding = TopicBinding.parse({"topic": "orders", "Protocol": None})
        assert binding.protocol == "lambda"
        assert not binding.has_delivery_policy

    def test_topic_binding_parse_is_idempotent(self):
        binding = TopicBinding("orders", "sqs")
        assert TopicBinding.parse(binding) is binding

    @pytest.mark.parametrize("raw_binding", [{}, {"Protocol": "https"}, {"topic": ""}, "   ", 42, None, ["orders"]])
    def test_topic_binding_invalid(self, raw_binding):
        with pytest.raises(InvalidTopicBindingError) as error:
            TopicBinding.parse(raw_binding, "notify")
        assert error.value.function_key == "notify"
        assert isinstance(error.value, ValueError)


class TestFunctionDefinition:
    def test_function_definition_from_config(self):
        function_def = FunctionDefinition.from_config("notify", {"events": [{"externalSNS": "orders"}]}, "svc-dev-notify")
        assert function_def.key == "notify"
        assert function_def.name == "svc-dev-notify"

        function_def = FunctionDefinition.from_config("notify", {"name": "notify-dev"}, "svc-dev-notify")
        assert function_def.name == "notify-dev"
        assert function_def.events == []

    def test_function_definition_external_sns_events_order(self):
        function_def = FunctionDefinition(
            "notify",
            "notify-dev",
            [
                {"externalSNS": "orders"},
                {"http": {"path": "orders", "method": "post"}},
                {"externalSNS": {"topic": "refunds"}},
                "schedule",
            ],
        )
        assert function_def.external_sns_events() == ["orders", {"topic": "refunds"}]
        assert [b.topic for b in function_def.topic_bindings()] == ["orders", "refunds"]

    def test_function_definition_http_path(self):
        assert FunctionDefinition("f", "f", [{"http": {"path": "orders/new", "method": "post"}}]).http_path() == "orders/new"
        assert FunctionDefinition("f", "f", [{"http": "POST orders/new"}]).http_path() == "orders/new"
        assert FunctionDefinition("f", "f", [{"externalSNS": "orders"}]).http_path() is None
        # first http event wins
        assert FunctionDefinition("f", "f", [{"http": {"path": "a"}}, {"http": {"path": "b"}}]).http_path() == "a"


class TestSubscriptionInfo:
    def test_subscription_info_is_subscribed(self):
        assert not SubscriptionInfo("fn_arn", "topic_arn").is_subscribed
        assert SubscriptionInfo("fn_arn", "topic_arn", "sub_arn", "fn_arn").is_subscribed
