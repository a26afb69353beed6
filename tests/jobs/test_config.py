from mock import patch

import jenkins_remote
from jenkins_remote.config import JobConfig
from tests.helper import build_response_mock
from tests.jobs.base import JenkinsJobsTestBase


class JenkinsGetJobConfigTest(JenkinsJobsTestBase):

    @patch('jenkins_remote.requests.Session.send', autospec=True)
    def test_encodes_job_name(self, session_send_mock):
        session_send_mock.return_value = build_response_mock(
            200, content=self.config_xml)

        self.j.get_job_config(u'Test Job')

        self.assertEqual(
            self.got_request_urls(session_send_mock),
            [self.make_url('job/Test%20Job/config.xml')])

    @patch('jenkins_remote.requests.Session.send', autospec=True)
    def test_in_folder(self, session_send_mock):
        session_send_mock.return_value = build_response_mock(
            200, content=self.config_xml)

        self.j.get_job_config(u'a Folder/Test Job')

        self.assertEqual(
            self.got_request_urls(session_send_mock),
            [self.make_url('job/a%20Folder/job/Test%20Job/config.xml')])

    @patch('jenkins_remote.requests.Session.send', autospec=True)
    def test_decoded(self, session_send_mock):
        session_send_mock.return_value = build_response_mock(
            200, content=self.config_xml)

        config = self.j.get_job_config(u'TestJob')

        self.assertIsInstance(config, JobConfig)
        self.assertEqual(config.tag, 'project')
        self.assertEqual(config.description, 'Foo')
        self.assertTrue(config.can_roam)
        self.assertFalse(config.disabled)
        self.assertEqual(config.scm, '<scm class="hudson.scm.NullSCM" />')
        self.assertEqual(config.triggers, [])
        self.assertEqual(len(config.builders), 1)
        self.assertIn('<command>make test</command>', config.builders[0])

    @patch('jenkins_remote.requests.Session.send', autospec=True)
    def test_status_500(self, session_send_mock):
        session_send_mock.return_value = build_response_mock(
            500, content=self.config_xml, reason='Server Error')

        with self.assertRaises(jenkins_remote.BadHTTPException) as context_manager:
            self.j.get_job_config(u'TestJob')
        self.assertIn('500', str(context_manager.exception))
        self.assertEqual(context_manager.exception.status_code, 500)

    @patch('jenkins_remote.requests.Session.send', autospec=True)
    def test_malformed_xml(self, session_send_mock):
        response = build_response_mock(200, content=b'<project><description>')
        session_send_mock.return_value = response

        with self.assertRaises(jenkins_remote.ResponseDecodeException) as context_manager:
            self.j.get_job_config(u'TestJob')
        self.assertIn('Could not parse XML response', str(context_manager.exception))
        response.raw.release_conn.assert_called_once_with()

    @patch('jenkins_remote.requests.Session.send', autospec=True)
    def test_invalid_value(self, session_send_mock):
        session_send_mock.return_value = build_response_mock(
            200, content=b'<project><disabled>maybe</disabled></project>')

        with self.assertRaises(jenkins_remote.ResponseDecodeException):
            self.j.get_job_config(u'TestJob')


    @patch('jenkins_remote.requests.Session.send', autospec=True)
    def test_redirect(self, session_send_mock):
        response = build_response_mock(
            302, headers={'Location': 'http://example.com/login'},
            reason='Found')
        session_send_mock.return_value = response

        with self.assertRaises(jenkins_remote.BadHTTPException) as context_manager:
            self.j.get_job_config(u'TestJob')
        self.assertEqual(str(context_manager.exception),
                         'Error in request [302]: Found')
        self.assertEqual(context_manager.exception.status_code, 302)
        response.raw.release_conn.assert_called_once_with()


class JenkinsReconfigJobTest(JenkinsJobsTestBase):

    @patch('jenkins_remote.requests.Session.send', autospec=True)
    def test_simple(self, session_send_mock):
        session_send_mock.return_value = build_response_mock(200)

        self.j.reconfig_job(u'Test Job', self.config)

        request = self.got_request(session_send_mock)
        self.assertEqual(request.method, 'POST')
        self.assertEqual(request.url, self.make_url('job/Test%20Job/config.xml'))
        self.assertEqual(request.body, self.config.to_xml())
        self.assertEqual(request.headers['Content-Type'],
                         'text/xml; charset=utf-8')

    @patch('jenkins_remote.requests.Session.send', autospec=True)
    def test_status_500(self, session_send_mock):
        session_send_mock.return_value = build_response_mock(
            500, reason='Server Error')

        with self.assertRaises(jenkins_remote.BadHTTPException) as context_manager:
            self.j.reconfig_job(u'TestJob', self.config)
        self.assertIn('[500]', str(context_manager.exception))

    @patch('jenkins_remote.requests.Session.send', autospec=True)
    def test_redirect(self, session_send_mock):
        session_send_mock.return_value = build_response_mock(
            302, headers={'Location': 'http://example.com/login'},
            reason='Found')

        with self.assertRaises(jenkins_remote.BadHTTPException) as context_manager:
            self.j.reconfig_job(u'TestJob', self.config)
        self.assertIn('[302]', str(context_manager.exception))
