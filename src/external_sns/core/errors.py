# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from typing import Any, Dict, List, Optional


class ExternalSNSError(Exception):
    """Base for all of the errors raised by this plugin."""


class InvalidTopicBindingError(ExternalSNSError, ValueError):
    """An 'externalSNS' event declaration that cannot be turned into a topic binding."""

    def __init__(self, function_key: Optional[str], raw_binding: Any, reason: str) -> None:
        self.function_key = function_key
        self.raw_binding = raw_binding
        self.reason = reason
        super().__init__(f"Invalid externalSNS binding {raw_binding!r} on function {function_key!r}: {reason}")


class RemoteOperationError(ExternalSNSError):
    """Wraps a failed AWS API call along with the operation and the parameters that were attempted."""

    def __init__(self, operation: str, params: Dict[str, Any], cause: Exception, error_code: Optional[str] = None) -> None:
        self.operation = operation
        self.params = dict(params)
        self.cause = cause
        self.error_code = error_code
        super().__init__(f"Remote operation {operation!r} failed with params {self.params!r}! Error code: {error_code!r}, error: {cause!s}")


class FunctionNotFoundError(ExternalSNSError):
    """The function has not been deployed yet (or has already been removed)."""

    def __init__(self, function_name: str) -> None:
        self.function_name = function_name
        super().__init__(f"Function {function_name!r} could not be found! Make sure that it is deployed.")


class ReconciliationError(ExternalSNSError):
    """Raised once all of the bindings are visited, if any of them failed."""

    def __init__(self, failures: List["ActionFailure"]) -> None:
        self.failures = failures
        details = "; ".join(f"{f.function_key}->{f.topic}: {f.error}" for f in failures)
        super().__init__(f"{len(failures)} externalSNS reconciliation(s) failed: {details}")


class ActionFailure:
    def __init__(self, function_key: str, topic: str, error: ExternalSNSError) -> None:
        self.function_key = function_key
        self.topic = topic
        self.error = error

    def __repr__(self) -> str:
        return f"ActionFailure(function_key={self.function_key!r}, topic={self.topic!r}, error={self.error!r})"
