# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from setuptools import find_packages, setup
from src.external_sns import __version__ as version

REQUIRED_PACKAGES = [
    'boto3 >= 1.41.1',
    'botocore',
    'validators >= 0.11.0',
]

TEST_PACKAGES = [
    'moto[apigateway] >= 5.0.0',
    'pytest',
    'mock'
]

setup(
    name="external-sns",
    python_requires=">=3.10",
    version=version,
    description="Subscribes the functions of a serverless service to SNS topics that are managed outside of the service.",
    keywords="aws cloud serverless lambda sns subscription deployment",
    author="Amazon.com Inc.",
    license="Apache 2.0",

    packages=find_packages(where="src", exclude=("test",)),
    package_dir={"": "src"},
    install_requires=REQUIRED_PACKAGES,
    tests_require=TEST_PACKAGES,
    extras_require={"test": TEST_PACKAGES},
    test_suite='test',
    include_package_data=True,
)
