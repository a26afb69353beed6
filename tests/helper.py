import json

from mock import Mock
import requests
import socketserver


class NullServer(socketserver.TCPServer):

    request_queue_size = 1

    def __init__(self, server_address, *args, **kwargs):
        # simply init'ing is sufficient to open the port, which
        # with the server not started creates a black hole server
        super().__init__(server_address, socketserver.BaseRequestHandler,
                         *args, **kwargs)


def build_response_mock(status_code, json_body=None, headers=None,
                        content=None, **kwargs):
    '''Return a real ``requests.Response`` as if read from the network.

    ``json_body`` is serialized into the body, ``content`` is used as is.
    ``response.raw`` is a mock, so ``response.raw.release_conn`` records
    every ``close()`` of the response.
    '''
    response = requests.Response()
    response.status_code = status_code
    response.encoding = 'utf-8'

    if json_body is not None:
        content = json.dumps(json_body).encode('utf-8')
    response._content = content if content is not None else b''
    response._content_consumed = True
    response.raw = Mock(spec=['release_conn', 'close'])

    if headers is not None:
        for k, v in headers.items():
            response.headers[k] = v

    for k, v in kwargs.items():
        setattr(response, k, v)

    return response
