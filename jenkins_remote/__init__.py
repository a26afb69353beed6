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
.. module:: jenkins_remote
    :platform: Unix, Windows
    :synopsis: Python API to the Jenkins remote API

Every public method performs one synchronous request, two for
:meth:`Jenkins.build_job`, and returns a value decoded from that single
response.  Nothing is cached between calls.

Example::

    >>> server = Jenkins('http://localhost:8080', 'admin', 'api-token')
    >>> item = server.build_job('nightly', {'BRANCH': 'main'})
    >>> print(item.id, item.why)
'''

import enum
import logging
import os
from urllib.parse import quote, urlencode, urljoin, urlparse
import xml.etree.ElementTree as ET

import requests
import requests.exceptions as req_exc
from requests.packages.urllib3.exceptions import InsecureRequestWarning

from jenkins_remote import endpoints
from jenkins_remote.config import JobConfig, ListView
from jenkins_remote.models import Build, Credentials, Job, JobList, Queue, \
    QueueItem

logger = logging.getLogger(__name__)
# Set default logging handler to avoid "No handler found" warnings.
logger.addHandler(logging.NullHandler())

DEFAULT_HEADERS = {'Content-Type': 'text/xml; charset=utf-8'}


class JenkinsException(Exception):
    '''General exception type for jenkins-API-related failures.'''
    pass


class BadHTTPException(JenkinsException):
    '''The server answered with an error status.

    The status is kept in ``status_code`` and repeated in the message.
    '''

    def __init__(self, *args, **kwargs):
        self.status_code = kwargs.pop('status_code', None)
        super().__init__(*args, **kwargs)


class NotFoundException(BadHTTPException):
    '''A special exception to call out the case of receiving a 404.'''
    pass


class ResponseDecodeException(JenkinsException):
    '''The response body did not match the expected shape.'''
    pass


class EmptyResponseException(ResponseDecodeException):
    '''A special exception to call out the case receiving an empty response.'''
    pass


class QueueLocationException(JenkinsException):
    '''A build trigger was not answered with a usable queue item location.'''
    pass


class Decode(enum.Enum):
    '''How :meth:`Jenkins.jenkins_request` turns a response into a result.'''

    #: discard the body
    NONE = 'none'
    #: return the body bytes untouched
    RAW = 'raw'
    #: validate the body with a pydantic model
    JSON = 'json'
    #: parse the body with a :class:`jenkins_remote.config.ConfigDocument`
    XML = 'xml'
    #: like JSON, but an empty body is resolved through ``Location``
    QUEUE_ITEM = 'queue_item'


# resources read through the JSON API get endpoints.INFO appended
API_DECODES = (Decode.JSON, Decode.QUEUE_ITEM)


class WrappedSession(requests.Session):
    """A wrapper for requests.Session to override 'verify' property, ignoring REQUESTS_CA_BUNDLE environment variable.

    This is a workaround for https://github.com/kennethreitz/requests/issues/3829 (will be fixed in requests 3.0.0)
    """

    def merge_environment_settings(self, url, proxies, stream, verify, *args,
                                   **kwargs):
        if self.verify is False:
            verify = False

        return super().merge_environment_settings(url, proxies, stream,
                                                  verify, *args, **kwargs)


class Jenkins(object):

    def __init__(self, url, username='', password='', timeout=None,
                 session=None):
        '''Create handle to Jenkins instance.

        All methods will raise :class:`JenkinsException` on failure, except
        for network errors, which are raised by ``requests`` unchanged.

        :param url: URL of Jenkins server, ``str``
        :param username: Server username, ``str``
        :param password: API token (or password) of ``username``, ``str``
        :param timeout: Server connection timeout in secs (default: not set), ``int``
        :param session: transport to send requests with, defaults to a new
            :class:`WrappedSession`; its ``auth`` is replaced,
            ``requests.Session``
        '''
        if url[-1] == '/':
            self.server = url
        else:
            self.server = url + '/'

        self.credentials = Credentials(username=username or '',
                                       api_token=password or '')
        self.timeout = timeout
        self._session = session if session is not None else WrappedSession()
        # anonymous access is just empty credentials
        self._session.auth = requests.auth.HTTPBasicAuth(
            self.credentials.username.encode('utf-8'),
            self.credentials.api_token.encode('utf-8'))

        extra_headers = os.environ.get("JENKINS_API_EXTRA_HEADERS", "")
        if extra_headers:
            logger.warning("JENKINS_API_EXTRA_HEADERS adds these HTTP headers: %s",
                           extra_headers.split("\n"))
        for token in extra_headers.split("\n"):
            if ":" in token:
                header, value = token.split(":", 1)
                self._session.headers[header] = value.strip()

        if os.getenv('PYTHONHTTPSVERIFY', '1') == '0':
            logger.debug('PYTHONHTTPSVERIFY=0 detected so we will '
                         'disable requests library SSL verification to keep '
                         'compatibility with older versions.')
            requests.packages.urllib3.disable_warnings(InsecureRequestWarning)
            self._session.verify = False

    @property
    def auth(self):
        return self._session.auth

    def _get_encoded_params(self, params):
        for k, v in params.items():
            if k in ["name", "short_name", "folder_url", "relative_path"]:
                params[k] = quote(v.encode('utf8'))
        return params

    def _encode_query(self, params):
        '''Encode query parameters, always in the same order.

        Dictionaries are encoded sorted by key, lists of two membered tuples
        in their own order.
        '''
        if not params:
            return ''
        if isinstance(params, dict):
            params = sorted(params.items())
        return urlencode(params, doseq=True)

    def _build_url(self, format_spec, variables=None, params=None,
                   decode=Decode.JSON, base=None):
        '''Return the URL of a resource.

        :param format_spec: path template from :mod:`jenkins_remote.endpoints`
        :param variables: values for the template, quoted before use
        :param params: query parameters, ``dict`` or
            ``list of two membered tuples``
        :param decode: resources decoded from the JSON API get
            ``api/json`` appended to their path, :class:`Decode`
        :param base: URL the path is relative to, defaults to the server
        '''
        if variables:
            url_path = format_spec % self._get_encoded_params(variables)
        else:
            url_path = format_spec

        if decode in API_DECODES:
            url_path = url_path.rstrip('/')
            url_path = url_path + '/' + endpoints.INFO if url_path \
                else endpoints.INFO

        url = str(urljoin(base or self.server, url_path))
        query = self._encode_query(params)
        if query:
            url = url + '?' + query
        return url

    def _get_job_folder(self, name):
        '''Return the name and folder (see cloudbees plugin).

        This is a method to support cloudbees folder plugin.
        Url request should take into account folder path when the job name specify it
        (ex.: 'folder/job')

        :param name: Job name, ``str``
        :returns: Tuple [ 'folder path for Request', 'Name of job without folder path' ]
        '''

        a_path = name.split('/')
        short_name = a_path[-1]
        folder_url = (('job/' + '/job/'.join(a_path[:-1]) + '/')
                      if len(a_path) > 1 else '')

        return folder_url, short_name

    def _get_job_name(self, job):
        if isinstance(job, Job):
            return job.full_name or job.name
        return job

    def _get_build_url(self, build):
        if not build.url:
            raise JenkinsException('build[%s] has no url' % build.number)
        return build.url.rstrip('/') + '/'

    def _request(self, req):

        r = self._session.prepare_request(req)
        # requests.Session.send() does not honor env settings by design
        # see https://github.com/requests/requests/issues/2807
        _settings = self._session.merge_environment_settings(
            r.url, {}, True, self._session.verify, None)
        _settings['timeout'] = self.timeout
        # a queue item Location must reach the caller, not be followed
        return self._session.send(r, allow_redirects=False, **_settings)

    def _response_handler(self, response, decode=Decode.NONE):
        '''Raise for any status outside 2xx, whatever the body.

        Redirects are only accepted when decoding a queue item: a build
        trigger is answered with 201 or 302 and a ``Location`` header.
        '''
        status = response.status_code
        if 300 <= status < 400 and decode == Decode.QUEUE_ITEM:
            return response
        if status < 200 or 300 <= status < 400:
            raise BadHTTPException(
                'Error in request [%s]: %s' % (status, response.reason),
                status_code=status)
        try:
            response.raise_for_status()
        except req_exc.HTTPError as e:
            status = e.response.status_code
            if status == 404:
                raise NotFoundException(
                    'Requested item could not be found [404]: %s'
                    % e.response.url, status_code=status)
            # Jenkins's funky authentication means its nigh impossible to
            # distinguish errors.
            if status in [401, 403, 500]:
                msg = 'Error in request. ' + \
                      'Possibly authentication failed [%s]: %s' % (
                          status, e.response.reason)
                if e.response.text:
                    msg += '\n' + e.response.text
            else:
                msg = 'Error in request [%s]: %s' % (status, e.response.reason)
            raise BadHTTPException(msg, status_code=status)
        return response

    def _decode_response(self, response, decode, shape):
        if decode == Decode.NONE:
            return None
        if decode == Decode.RAW:
            return response.content

        body = response.content
        if not body:
            raise EmptyResponseException(
                "Error communicating with server[%s]: "
                "empty response" % self.server)
        try:
            if decode == Decode.XML:
                return shape.from_xml(body)
            return shape.model_validate_json(body)
        except (ET.ParseError, ValueError) as e:
            raise ResponseDecodeException(
                'Could not parse %s response from server[%s] as %s: %s'
                % (decode.name, self.server, shape.__name__, e))

    def _get_queue_item_number(self, location):
        '''Return the number of the queue item ``location`` points at.

        :param location: ``Location`` header, eg.
            ``http://jenkins/queue/item/25/``
        :throws: :class:`QueueLocationException` unless the URL path ends
            with ``queue/item/<number>``
        '''
        if not location:
            raise QueueLocationException(
                "Header 'Location' not found in "
                "response from server[%s]" % self.server)

        # Jenkins may be served below a prefix, only the tail is fixed
        segments = [s for s in urlparse(location).path.split('/') if s]
        if (len(segments) < 3 or segments[-3:-1] != ['queue', 'item'] or
                not segments[-1].isdecimal()):
            raise QueueLocationException(
                "Header 'Location' of response from server[%s] does not "
                "point to a queue item: %s" % (self.server, location))
        return int(segments[-1])

    def jenkins_request(self, req, decode=Decode.JSON, shape=None):
        '''Utility routine for opening an HTTP request to a Jenkins server.

        The response is always closed before this returns, whether
        decoding succeeded or not.

        :param req: A ``requests.Request`` to submit.
        :param decode: how to turn the response into a result, :class:`Decode`
        :param shape: model class the body is decoded into; a pydantic
            model for ``JSON`` and ``QUEUE_ITEM``, a
            :class:`jenkins_remote.config.ConfigDocument` for ``XML``
        :returns: an instance of ``shape``, ``bytes`` for ``RAW`` or
            ``None`` for ``NONE``
        '''
        logger.debug('%s %s (decode: %s)', req.method, req.url, decode.name)
        with self._request(req) as response:
            self._response_handler(response, decode)
            if decode != Decode.QUEUE_ITEM or response.content:
                return self._decode_response(response, decode, shape)
            number = self._get_queue_item_number(
                response.headers.get('Location'))

        logger.debug('Resolving queue item %d from server[%s]',
                     number, self.server)
        return self.get_queue_item(number)

    def get_jobs(self):
        '''Get list of jobs.

        Jobs are listed as the root resource of the server returns them,
        typically with ``name``, ``url`` and ``color`` only.

        :returns: list of jobs, ``[Job]``
        '''
        return self.jenkins_request(requests.Request(
            'GET', self._build_url(endpoints.ROOT)
        ), Decode.JSON, JobList).jobs

    def get_job(self, name):
        '''Get job information.

        :param name: Job name (``folder/job`` for jobs in folders), ``str``
            or :class:`Job`
        :returns: job information, :class:`Job`
        '''
        name = self._get_job_name(name)
        folder_url, short_name = self._get_job_folder(name)
        return self.jenkins_request(requests.Request(
            'GET', self._build_url(endpoints.JOB, locals())
        ), Decode.JSON, Job)

    def get_job_config(self, name):
        '''Get configuration of existing Jenkins job.

        :param name: Name of Jenkins job, ``str`` or :class:`Job`
        :returns: job configuration, :class:`JobConfig`
        '''
        name = self._get_job_name(name)
        folder_url, short_name = self._get_job_folder(name)
        return self.jenkins_request(requests.Request(
            'GET', self._build_url(endpoints.CONFIG_JOB, locals(),
                                   decode=Decode.XML)
        ), Decode.XML, JobConfig)

    def get_build(self, name, number):
        '''Get build information.

        :param name: Job name, ``str`` or :class:`Job`
        :param number: Build number, ``int``
        :returns: build information, :class:`Build`
        '''
        name = self._get_job_name(name)
        folder_url, short_name = self._get_job_folder(name)
        return self.jenkins_request(requests.Request(
            'GET', self._build_url(endpoints.BUILD, locals())
        ), Decode.JSON, Build)

    def create_job(self, name, config):
        '''Create a new Jenkins job

        :param name: Name of Jenkins job, ``str``
        :param config: job configuration, :class:`JobConfig`
        '''
        folder_url, short_name = self._get_job_folder(name)
        self.jenkins_request(requests.Request(
            'POST', self._build_url(endpoints.CREATE_JOB, locals(),
                                    params={'name': short_name},
                                    decode=Decode.NONE),
            data=config.to_xml(),
            headers=DEFAULT_HEADERS
        ), Decode.NONE)

    def reconfig_job(self, name, config):
        '''Change configuration of existing Jenkins job.

        To create a new job, see :meth:`Jenkins.create_job`.

        :param name: Name of Jenkins job, ``str`` or :class:`Job`
        :param config: New configuration, :class:`JobConfig`
        '''
        name = self._get_job_name(name)
        folder_url, short_name = self._get_job_folder(name)
        self.jenkins_request(requests.Request(
            'POST', self._build_url(endpoints.CONFIG_JOB, locals(),
                                    decode=Decode.NONE),
            data=config.to_xml(),
            headers=DEFAULT_HEADERS
        ), Decode.NONE)

    def add_job_to_view(self, view_name, job):
        '''Add an existing job to a list view.

        :param view_name: Name of Jenkins view, ``str``
        :param job: Name of Jenkins job, ``str`` or :class:`Job`
        '''
        name = view_name
        self.jenkins_request(requests.Request(
            'POST', self._build_url(endpoints.ADD_JOB_TO_VIEW, locals(),
                                    params={'name': self._get_job_name(job)},
                                    decode=Decode.NONE)
        ), Decode.NONE)

    def create_view(self, view):
        '''Create a new Jenkins view

        :param view: view configuration, named after the view to create,
            :class:`ListView`
        '''
        self.jenkins_request(requests.Request(
            'POST', self._build_url(endpoints.CREATE_VIEW,
                                    params={'name': view.name},
                                    decode=Decode.NONE),
            data=view.to_xml(),
            headers=DEFAULT_HEADERS
        ), Decode.NONE)

    def get_view_config(self, name):
        '''Get configuration of existing Jenkins view.

        :param name: Name of Jenkins view, ``str``
        :returns: view configuration, :class:`ListView`
        '''
        return self.jenkins_request(requests.Request(
            'GET', self._build_url(endpoints.CONFIG_VIEW, locals(),
                                   decode=Decode.XML)
        ), Decode.XML, ListView)

    def build_job(self, name, parameters=None, token=None):
        '''Trigger build job.

        Jenkins answers a build request with the location of a queue item
        only; that item is fetched and returned as it is at that moment.
        Poll :meth:`Jenkins.get_queue_item` to find out when it turns into a
        build (its ``executable``).

        Use ``list of two membered tuples`` to supply parameters with multi
        select options.

        :param name: Name of Jenkins job, ``str`` or :class:`Job`
        :param parameters: parameters for job, or ``None``. Any other value,
            an empty ``dict`` included, triggers a parameterized build,
            ``dict`` or ``list of two membered tuples``
        :param token: (optional) token for building job, ``str``
        :returns: the queued build request, :class:`QueueItem`
        '''
        name = self._get_job_name(name)
        folder_url, short_name = self._get_job_folder(name)
        if parameters is None:
            format_spec = endpoints.BUILD_JOB
            query = []
        elif isinstance(parameters, (dict, list)):
            format_spec = endpoints.BUILD_WITH_PARAMS_JOB
            query = parameters
        else:
            raise JenkinsException('build parameters can be a dictionary '
                                   'like {"param_key": "param_value", ...} '
                                   'or a list of two membered tuples '
                                   'like [("param_key", "param_value",), ...]')
        if token:
            if isinstance(query, dict):
                query = dict(query, token=token)
            else:
                query = list(query) + [('token', token)]

        return self.jenkins_request(requests.Request(
            'POST', self._build_url(format_spec, locals(), params=query,
                                    decode=Decode.QUEUE_ITEM)
        ), Decode.QUEUE_ITEM, QueueItem)

    def get_build_console_output(self, build):
        '''Get build console text.

        :param build: build as returned by :meth:`Jenkins.get_build`,
            :class:`Build`
        :returns: Build console output, exactly as sent, ``bytes``
        '''
        return self.jenkins_request(requests.Request(
            'GET', self._build_url(endpoints.BUILD_CONSOLE_OUTPUT,
                                   decode=Decode.RAW,
                                   base=self._get_build_url(build))
        ), Decode.RAW)

    def get_queue(self):
        '''Get the build queue.

        :returns: queued build requests in server order, :class:`Queue`
        '''
        return self.jenkins_request(requests.Request(
            'GET', self._build_url(endpoints.Q_INFO)
        ), Decode.JSON, Queue)

    def get_queue_item(self, number):
        '''Get information about a queued item (to-be-created job).

        The returned item will have ``why`` set if the queued item is still
        waiting for an executor, and ``executable`` once it is running on an
        executor or has completed running.

        :param number: queue number, ``int``
        :returns: queued item, :class:`QueueItem`
        '''
        return self.jenkins_request(requests.Request(
            'GET', self._build_url(endpoints.Q_ITEM, locals())
        ), Decode.JSON, QueueItem)

    def get_artifact(self, build, artifact):
        '''Get the content of a build artifact.

        :param build: build that archived the artifact, :class:`Build`
        :param artifact: one of ``build.artifacts``, :class:`Artifact`
        :returns: artifact content, exactly as sent, ``bytes``
        '''
        relative_path = artifact.relative_path
        return self.jenkins_request(requests.Request(
            'GET', self._build_url(endpoints.BUILD_ARTIFACT, locals(),
                                   decode=Decode.RAW,
                                   base=self._get_build_url(build))
        ), Decode.RAW)

    def get_version(self):
        """Get the version of this Master.

        :returns: This master's version number ``str``

        Example::

            >>> info = server.get_version()
            >>> print(info)
            1.541

        """
        request = requests.Request(
            'GET', self._build_url(endpoints.ROOT, decode=Decode.NONE))
        with self._request(request) as response:
            self._response_handler(response)
            if 'X-Jenkins' not in response.headers:
                raise EmptyResponseException(
                    "Header 'X-Jenkins' not found in "
                    "response from server[%s]" % self.server)
            return response.headers['X-Jenkins']
