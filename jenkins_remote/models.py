#!/usr/bin/env python
# Software License Agreement (BSD License)
#
# Copyright (c) 2010, Willow Garage, Inc.
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions
# are met:
#
#  * Redistributions of source code must retain the above copyright
#    notice, this list of conditions and the following disclaimer.
#  * Redistributions in binary form must reproduce the above
#    copyright notice, this list of conditions and the following
#    disclaimer in the documentation and/or other materials provided
#    with the distribution.
#  * Neither the name of Willow Garage, Inc. nor the names of its
#    contributors may be used to endorse or promote products derived
#    from this software without specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS
# 'AS IS' AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT
# LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS
# FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE
# COPYRIGHT OWNER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING,
# BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES;
# LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT
# LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN
# ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

'''
.. module:: jenkins_remote.models
    :platform: Unix, Windows
    :synopsis: Shapes of the JSON resources served by Jenkins

Field names follow Python conventions; the camelCase names used on the wire
are generated as aliases.  Fields Jenkins sends that are not modelled here
are kept on the instance (``model_extra``) rather than dropped.
'''

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Credentials(BaseModel):
    '''Username and API token sent with every request.'''

    model_config = ConfigDict(frozen=True)

    username: str = ''
    # not shown in repr()
    api_token: str = Field('', repr=False)


class JenkinsModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel,
                              populate_by_name=True,
                              extra='allow')


class Artifact(JenkinsModel):
    relative_path: str
    file_name: str = ''
    display_path: Optional[str] = None


class BuildReference(JenkinsModel):
    # hudson.model.FreeStyleBuild, as referenced from jobs and queue items
    number: int
    url: str = ''


class Build(BuildReference):
    result: Optional[str] = None
    timestamp: int = 0
    duration: int = 0
    building: bool = False
    full_display_name: str = ''
    id: str = ''
    artifacts: List[Artifact] = []


class Task(JenkinsModel):
    name: str
    url: str = ''
    color: Optional[str] = None


class QueueItem(JenkinsModel):
    '''A build request that has been accepted but has not started yet.

    ``why`` is set while the item waits for an executor, ``executable``
    once it has been promoted to a build.
    '''

    id: int
    url: str = ''
    why: Optional[str] = None
    blocked: bool = False
    buildable: bool = False
    stuck: bool = False
    cancelled: Optional[bool] = None
    in_queue_since: Optional[int] = None
    params: str = ''
    task: Optional[Task] = None
    executable: Optional[BuildReference] = None


class Queue(JenkinsModel):
    items: List[QueueItem] = []


class Job(JenkinsModel):
    name: str
    url: str = ''
    color: Optional[str] = None
    display_name: Optional[str] = None
    full_name: Optional[str] = None
    description: Optional[str] = None
    buildable: bool = False
    builds: List[BuildReference] = []
    in_queue: bool = False
    queue_item: Optional[QueueItem] = None
    first_build: Optional[BuildReference] = None
    last_build: Optional[BuildReference] = None
    last_completed_build: Optional[BuildReference] = None
    last_failed_build: Optional[BuildReference] = None
    last_successful_build: Optional[BuildReference] = None
    next_build_number: Optional[int] = None


class JobList(JenkinsModel):
    # the root resource; only its job list is of interest
    jobs: List[Job] = []
