#!/usr/bin/env python
# Software License Agreement (BSD License)
#
# Copyright (c) 2015 Hewlett-Packard Development Company, L.P.
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
#

'''
.. module:: jenkins_remote.endpoints
    :platform: Unix, Windows
    :synopsis: REST paths of the Jenkins remote API

Paths are relative to the server root.  Resources decoded as JSON get
:data:`INFO` appended by :meth:`jenkins_remote.Jenkins._build_url`, so the
templates below never carry it themselves.
'''

INFO = 'api/json'
ROOT = ''
JOB = '%(folder_url)sjob/%(short_name)s'
CONFIG_JOB = '%(folder_url)sjob/%(short_name)s/config.xml'
BUILD = '%(folder_url)sjob/%(short_name)s/%(number)d'
CREATE_JOB = '%(folder_url)screateItem'  # also post config.xml
BUILD_JOB = '%(folder_url)sjob/%(short_name)s/build'
BUILD_WITH_PARAMS_JOB = '%(folder_url)sjob/%(short_name)s/buildWithParameters'
Q_INFO = 'queue'
Q_ITEM = 'queue/item/%(number)d'
CREATE_VIEW = 'createView'  # also post config.xml
CONFIG_VIEW = 'view/%(name)s/config.xml'
ADD_JOB_TO_VIEW = 'view/%(name)s/addJobToView'

# relative to a build's own url
BUILD_CONSOLE_OUTPUT = 'consoleText'
BUILD_ARTIFACT = 'artifact/%(relative_path)s'
