"""
Module for REST test sessions
"""

import base64
import logging
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

from requests import Response, Session

from restsession import constants, paths
from restsession.content import ContentType, has_body, serialize_body
from restsession.exceptions import AssertionMismatch, SerializationError
from restsession.reporting import REPORT_MANAGER, ReportManager, assert_equals

LOGGER = logging.getLogger(__name__)


class AttachmentMode(Enum):
    """How the session state is attached to an outgoing request"""

    BARE = 1
    HEADERS = 2
    HEADERS_AND_COOKIES = 3


class RequestSession(object):
    """
    Stateful client for a REST API under test

    Every call to perform_request feeds the session: cookies returned by
    the API are replayed on the following requests, an XSRF-TOKEN cookie is
    echoed back as the X-XSRF-TOKEN header, the first credentials used turn
    into a Basic authorization header and a login response shaped like
    {"type": "Bearer", "token": ...} switches the session to bearer auth

    Failures (unexpected status, unsupported method, transport errors,
    extraction misses) never raise, they are recorded on the report manager
    and the call returns what it has

    One session per test thread, instances are not safe to share
    """

    def __init__(
        self,
        base_uri: str,
        http: Optional[Session] = None,
        reporter: Optional[ReportManager] = None,
        timeout: Optional[float] = None,
    ):
        self._base_uri = base_uri
        self.authorization = ""
        self.cookies: Dict[str, str] = {}
        self.headers: Dict[str, str] = {}

        self.http = http if http is not None else Session()
        self.reporter = reporter if reporter is not None else REPORT_MANAGER
        self.timeout = timeout

    @property
    def base_uri(self) -> str:
        return self._base_uri

    @property
    def attachment_mode(self) -> AttachmentMode:
        # once a cookie is known it goes out with every request
        if self.cookies:
            return AttachmentMode.HEADERS_AND_COOKIES
        if self.headers:
            return AttachmentMode.HEADERS
        return AttachmentMode.BARE

    """
    Reporting
    """

    def _pass_action(
        self, action: str, test_data: Optional[str] = None, response: Optional[Response] = None
    ):
        message = "Successfully performed action [{}].".format(action)
        if test_data is not None:
            message += " With the following test data [{}].".format(test_data)

        if self.reporter.discrete_logging:
            self.reporter.log_discrete(message)
        else:
            self.reporter.log(message)
            if response is not None:
                self.reporter.attach_as_step(
                    constants.RESPONSE_STEP_TITLE,
                    constants.RESPONSE_STEP_LABEL,
                    response.text,
                )

    def _fail_action(
        self, action: str, test_data: Optional[str] = None, response: Optional[Response] = None
    ):
        message = "Failed to perform action [{}].".format(action)
        if test_data is not None:
            message += " With the following test data [{}].".format(test_data)

        self.reporter.log(message)
        if response is not None:
            self.reporter.attach_as_step(
                constants.RESPONSE_STEP_TITLE,
                constants.RESPONSE_STEP_LABEL,
                response.text,
            )
        self.reporter.mark_failed(message)

    """
    Request preparation
    """

    def _prepare_request_url(self, resource_path: str, query_arguments: Optional[str] = None):
        url = f"{self.base_uri}{resource_path}"
        if query_arguments:
            url = f"{url}{constants.ARGUMENT_SEPARATOR}{query_arguments}"
        return url

    def _prepare_authorization(self, credentials: Sequence[str]):
        # first login wins, only a bearer token replaces it
        if self.authorization == "" and len(credentials) == 2:
            username, password = credentials
            encoded = base64.b64encode(
                "{}:{}".format(username, password).encode("utf-8")
            ).decode("ascii")
            self.authorization = f"{constants.BASIC_SCHEME} {encoded}"
            self.headers[constants.AUTHORIZATION_HEADER] = self.authorization

    def _build_request(
        self,
        method: str,
        body: Any,
        form_parameters: Optional[Sequence[Sequence[str]]],
        content_type: Optional[ContentType],
    ) -> Dict[str, Any]:
        """
        Keyword arguments carrying the payload of the request

        A non empty body always wins over form parameters. Form parameters
        travel in the query string for GET and DELETE and form encoded in
        the body otherwise
        """
        request = {}
        if has_body(body):
            try:
                request["data"] = serialize_body(body, content_type)
            except SerializationError as e:
                self.reporter.log_exception(e)
                self._fail_action(
                    constants.PERFORM_REQUEST_ACTION, "Issue with parsing body content"
                )
        elif form_parameters and form_parameters[0][0] != "":
            parameters = [(name, value) for name, value in form_parameters]
            if method in constants.QUERY_PARAM_METHODS:
                request["params"] = parameters
            else:
                request["data"] = parameters
        return request

    def _request_headers(self, content_type: Optional[ContentType]) -> Dict[str, str]:
        headers = dict(self.headers)
        if content_type is not None and content_type is not ContentType.ANY:
            headers[constants.CONTENT_TYPE_HEADER] = content_type.mime
        return headers

    def _send_request(
        self,
        method: str,
        url: str,
        request: Dict[str, Any],
        content_type: Optional[ContentType],
    ) -> Response:
        LOGGER.debug("%s %s [%s]", method, url, self.attachment_mode.name)

        headers = self._request_headers(content_type)
        try:
            return self.http.request(
                method=method,
                url=url,
                headers=headers or None,
                cookies=dict(self.cookies) if self.cookies else None,
                timeout=self.timeout,
                **request,
            )
        finally:
            # cookie replay is driven by self.cookies, not the transport's jar
            self.http.cookies.clear()

    """
    Response processing
    """

    def _extract_cookies(self, response: Response):
        for cookie in response.cookies:
            self.cookies[cookie.name] = cookie.value

            if cookie.name == constants.XSRF_COOKIE:
                self.headers[constants.XSRF_HEADER] = cookie.value

    def _extract_headers(self, response: Response):
        for name, value in response.headers.items():
            if name in constants.TRACKED_RESPONSE_HEADERS:
                self.headers[name] = value

        token = self._discover_bearer_token(response)
        if token is not None:
            self.authorization = f"{constants.BEARER_SCHEME} {token}"
            self.headers[constants.AUTHORIZATION_HEADER] = self.authorization
            self.headers[constants.CONTENT_TYPE_HEADER] = constants.JSON_MIME

    @staticmethod
    def _discover_bearer_token(response: Response) -> Optional[str]:
        """
        Token of a {"type": "Bearer", "token": ...} body, None for anything else
        """
        try:
            document = paths.load_json(response.text)
        except (ValueError, RecursionError):
            return None

        if not isinstance(document, dict):
            return None
        if document.get(constants.BEARER_TYPE_FIELD) != constants.BEARER_SCHEME:
            return None

        token = document.get(constants.BEARER_TOKEN_FIELD)
        if token is None:
            return None
        return paths.json_string(token)

    @staticmethod
    def _response_time(response: Response) -> int:
        return int(response.elapsed.total_seconds() * 1000)

    def _assert_response_status_code(
        self, url: str, response: Response, expected_status_code: Union[str, int]
    ):
        test_data = "{}, Response Time: {}ms".format(url, self._response_time(response))

        # the assertion itself stays quiet, the pass/fail action reports it
        discrete_logging = self.reporter.discrete_logging
        self.reporter.discrete_logging = True
        try:
            assert_equals(expected_status_code, response.status_code, self.reporter)
        except AssertionMismatch:
            self.reporter.discrete_logging = discrete_logging
            self._fail_action(constants.PERFORM_REQUEST_ACTION, test_data, response)
        else:
            self.reporter.discrete_logging = discrete_logging
            self._pass_action(constants.PERFORM_REQUEST_ACTION, test_data, response)

    """
    Core REST actions
    """

    def perform_request(
        self,
        method: str,
        expected_status_code: Union[str, int],
        resource_path: str,
        query_arguments: Optional[str] = None,
        form_parameters: Optional[Sequence[Sequence[str]]] = None,
        body: Any = None,
        content_type: Optional[ContentType] = None,
        credentials: Optional[Sequence[str]] = None,
    ) -> Optional[Response]:
        """
        Performs a POST/PATCH/GET/DELETE request and checks the status code

        The response is returned whether or not the status matched, a
        mismatch is recorded as a failed action on the report manager

        Parameters
        ----------
        method : str
            POST, PATCH, GET or DELETE, in any case
        expected_status_code : Union[str, int]
            status the API is expected to answer with, usually 200
        resource_path : str
            path appended to the base uri, e.g. /users/login
        query_arguments : Optional[str]
            '&' separated arguments without a leading '?', e.g. "page=1&size=20"
        form_parameters : Optional[Sequence[Sequence[str]]]
            (name, value) pairs, e.g. [("itemId", "123"), ("contents", xml)],
            ignored when a body is given
        body : Any
            request content, serialized to JSON or XML depending on content_type,
            sent as is otherwise
        content_type : Optional[ContentType]
            declared content type of the request
        credentials : Optional[Sequence[str]]
            (username, password) for Basic auth, only used while the session
            has no authorization yet

        Returns
        -------
        Optional[Response]
            the response, or None if no request could be sent
        """
        method = str(method).upper()
        url = self._prepare_request_url(resource_path, query_arguments)
        request = self._build_request(method, body, form_parameters, content_type)
        self._prepare_authorization(credentials or ())

        if method not in constants.SUPPORTED_METHODS:
            self.reporter.log(
                "Unsupported request method [{}], expected one of {}".format(
                    method, ", ".join(constants.SUPPORTED_METHODS)
                )
            )
            self._fail_action(constants.PERFORM_REQUEST_ACTION, url)
            return None

        response = None
        try:
            response = self._send_request(method, url, request, content_type)

            self._extract_cookies(response)
            self._extract_headers(response)

            self._assert_response_status_code(url, response, expected_status_code)
        except Exception as e:
            self.reporter.log_exception(e)
            if response is not None:
                self._fail_action(
                    constants.PERFORM_REQUEST_ACTION,
                    "{}, Response Time: {}ms".format(url, self._response_time(response)),
                    response,
                )
            else:
                self._fail_action(constants.PERFORM_REQUEST_ACTION, url)
        return response

    """
    Value extraction
    """

    @staticmethod
    def _response_text(response: Optional[Response]) -> str:
        # perform_request hands back None when nothing was sent
        if response is None:
            raise ValueError("no response to extract from")
        return response.text

    def _extract(self, action: str, path: str, kind: str, query: Callable[[], Any], default):
        try:
            value = query()
        except paths.EXTRACTION_ERRORS as e:
            LOGGER.debug("%s [%s] could not be evaluated: %s", kind, path, e)
            value = None

        if value is None:
            self.reporter.log(
                "Couldn't find anything that matches with the desired {} [{}]".format(
                    kind, path
                )
            )
            self._fail_action(action, path)
            return default

        self._pass_action(action, path)
        return value

    def get_response_json_value(self, response: Response, json_path: str) -> str:
        """
        Extracts a string value from a JSON response body

        Parameters
        ----------
        response : Response
            response returned by perform_request
        json_path : str
            dotted path to the value, e.g. "data.users[0].name"

        Returns
        -------
        str
            the value, or an empty string if nothing matched
        """
        return self._extract(
            "get_response_json_value",
            json_path,
            "JSON path",
            lambda: paths.json_value(
                paths.load_json(self._response_text(response)), json_path
            ),
            "",
        )

    def get_response_json_value_as_list(self, response: Response, json_path: str) -> list:
        """
        Extracts a list from a JSON response body, [""] if nothing matched
        """
        return self._extract(
            "get_response_json_value_as_list",
            json_path,
            "JSON path",
            lambda: paths.json_values(
                paths.load_json(self._response_text(response)), json_path
            ),
            [""],
        )

    def get_response_xml_value(self, response: Response, xml_path: str) -> str:
        """
        Extracts the text of an element or attribute from an XML response body,
        paths start with the root element, e.g. "order.items.item[1].@sku"
        """
        return self._extract(
            "get_response_xml_value",
            xml_path,
            "XML path",
            lambda: paths.xml_value(
                paths.load_xml(self._response_text(response)), xml_path
            ),
            "",
        )

    def get_response_xml_value_as_list(self, response: Response, xml_path: str) -> list:
        return self._extract(
            "get_response_xml_value_as_list",
            xml_path,
            "XML path",
            lambda: paths.xml_values(
                paths.load_xml(self._response_text(response)), xml_path
            ),
            [""],
        )

    def get_mapping_json_value(self, mapping: Mapping, json_path: str) -> str:
        """
        Same as get_response_json_value for a structure already taken out of a
        response, e.g. an element of get_response_json_value_as_list
        """
        return self._extract(
            "get_mapping_json_value",
            json_path,
            "JSON path",
            lambda: paths.json_value(paths.normalize_mapping(mapping), json_path),
            "",
        )

    def get_mapping_xml_value(self, mapping: Mapping, xml_path: str) -> str:
        return self._extract(
            "get_mapping_xml_value",
            xml_path,
            "XML path",
            lambda: paths.xml_value(paths.normalize_mapping(mapping), xml_path),
            "",
        )

    @staticmethod
    def get_response_status_code(response: Response) -> int:
        return response.status_code
