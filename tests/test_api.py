import unittest

import pytest
import requests_mock

from restsession.api import extract_values, perform_request
from restsession.reporting import ReportManager

BASE_URI = "https://api.example.com"


class OneShotRequestTests(unittest.TestCase):
    @requests_mock.Mocker()
    def test_perform_and_extract(self, m):
        m.get(BASE_URI + "/users/1", json={"user": {"name": "Ann"}}, cookies={"A": "1"})
        reporter = ReportManager()

        session, response = perform_request(
            BASE_URI, "GET", 200, "/users/1", reporter=reporter
        )

        self.assertEqual(session.cookies, {"A": "1"})
        self.assertEqual(
            extract_values(session, response, json_paths=["user.name"]),
            {"user.name": "Ann"},
        )
        self.assertFalse(reporter.failed)

    def test_extract_without_response(self):
        reporter = ReportManager()
        session, response = perform_request(
            BASE_URI, "TRACE", 200, "/users", reporter=reporter
        )

        self.assertIsNone(response)
        self.assertEqual(extract_values(session, response, json_paths=["a"]), {})
        self.assertTrue(reporter.failed)


if __name__ == "__main__":
    pytest.main()
