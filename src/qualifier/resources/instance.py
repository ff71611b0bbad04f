# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""EC2 worker status probe and CloudFormation stack worker lister."""

from botocore.exceptions import BotoCoreError, ClientError

from qualifier.common.exceptions import LivenessCheckError, WorkerListError
from qualifier.common.models import Worker

__all__ = ["Ec2WorkerStatusProbe", "StackWorkerLister"]

# EC2 instance-state-code of a running instance.
RUNNING_STATE_CODE = "16"
INSTANCE_RESOURCE_TYPE = "AWS::EC2::Instance"


class Ec2WorkerStatusProbe:
    """Reports whether an EC2 instance is in the running state."""

    def __init__(self, ec2_client) -> None:
        self._ec2 = ec2_client

    def is_running(self, worker_id: str) -> bool:
        try:
            output = self._ec2.describe_instance_status(
                InstanceIds=[worker_id],
                Filters=[{"Name": "instance-state-code", "Values": [RUNNING_STATE_CODE]}],
            )
        except (ClientError, BotoCoreError) as e:
            raise LivenessCheckError(
                f"Failed to describe the status of {worker_id}: {e}", worker_id=worker_id
            ) from e
        return len(output.get("InstanceStatuses", [])) > 0


class StackWorkerLister:
    """Lists the EC2 instances created by the run's CloudFormation stack."""

    def __init__(self, cloudformation_client, ec2_client, stack_name: str) -> None:
        self._cfn = cloudformation_client
        self._ec2 = ec2_client
        self._stack_name = stack_name

    def _instance_ids(self) -> list[str]:
        output = self._cfn.describe_stack_resources(StackName=self._stack_name)
        return [
            resource["PhysicalResourceId"]
            for resource in output.get("StackResources", [])
            if resource.get("ResourceType") == INSTANCE_RESOURCE_TYPE
        ]

    def list_workers(self) -> list[Worker]:
        """Return the instances of the stack.

        Raises:
            WorkerListError: If the stack or its instances cannot be described,
                e.g. because the stack was already deleted.
        """
        try:
            instance_ids = self._instance_ids()
            if not instance_ids:
                return []

            workers = []
            paginator = self._ec2.get_paginator("describe_instances")
            for page in paginator.paginate(InstanceIds=instance_ids):
                for reservation in page.get("Reservations", []):
                    for instance in reservation.get("Instances", []):
                        workers.append(
                            Worker(
                                worker_id=instance["InstanceId"],
                                worker_type=instance["InstanceType"],
                            )
                        )
        except (ClientError, BotoCoreError) as e:
            raise WorkerListError(
                f"Failed to list the instances of stack {self._stack_name}: {e}"
            ) from e
        return workers
