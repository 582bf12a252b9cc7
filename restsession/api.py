from typing import Dict, Iterable, Optional, Tuple

from requests import Response

from restsession.reporting import ReportManager
from restsession.session import RequestSession


def perform_request(
    base_uri: str,
    method: str,
    expected_status_code,
    resource_path: str,
    reporter: Optional[ReportManager] = None,
    timeout: Optional[float] = None,
    **kwargs
) -> Tuple[RequestSession, Optional[Response]]:
    """
    Single request through a throwaway session

    The session is returned alongside the response so its cookies and
    headers can be inspected or reused
    """
    session = RequestSession(base_uri, reporter=reporter, timeout=timeout)
    response = session.perform_request(
        method, expected_status_code, resource_path, **kwargs
    )
    return session, response


def extract_values(
    session: RequestSession,
    response: Optional[Response],
    json_paths: Iterable[str] = (),
    xml_paths: Iterable[str] = (),
) -> Dict[str, str]:
    if response is None:
        return {}

    values = {}
    for json_path in json_paths:
        values[json_path] = session.get_response_json_value(response, json_path)
    for xml_path in xml_paths:
        values[xml_path] = session.get_response_xml_value(response, xml_path)
    return values
