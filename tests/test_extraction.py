"""
Value extraction tests

Builds responses locally, no request is sent
"""
import sys
import unittest

import pytest
from requests import Response

from restsession.reporting import ReportManager
from restsession.session import RequestSession

USERS_BODY = """
{
    "data": {
        "users": [
            {"id": 1, "name": "Ann", "active": true},
            {"id": 2, "name": "Bob", "active": false}
        ]
    },
    "total": 2,
    "note": null
}
"""

ORDER_BODY = """<?xml version="1.0" encoding="utf-8"?>
<order>
    <id>7</id>
    <comment/>
    <items>
        <item sku="a1">Pen</item>
        <item sku="b2">Ink</item>
    </items>
</order>
"""


def make_response(text, status_code=200):
    response = Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    response._content = text.encode("utf-8")
    return response


class JSONExtractionTests(unittest.TestCase):
    def setUp(self):
        self.session = RequestSession("https://api.example.com", reporter=ReportManager())
        self.response = make_response(USERS_BODY)

    def test_value(self):
        value = self.session.get_response_json_value(self.response, "data.users[0].name")
        self.assertEqual(value, "Ann")
        self.assertEqual(self.session.get_response_json_value(self.response, "total"), "2")
        self.assertEqual(
            self.session.get_response_json_value(self.response, "data.users[-1].id"), "2"
        )
        self.assertEqual(self.session.reporter.failures, [])

    def test_value_with_root_marker(self):
        self.assertEqual(self.session.get_response_json_value(self.response, "$.total"), "2")

    def test_non_string_values(self):
        self.assertEqual(
            self.session.get_response_json_value(self.response, "data.users[0].active"),
            "true",
        )
        self.assertEqual(
            self.session.get_response_json_value(self.response, "data.users.id"),
            "[1, 2]",
        )

    def test_missing_value(self):
        """
        Returns empty string and records the failure
        """
        value = self.session.get_response_json_value(self.response, "nonexistent.path")

        self.assertEqual(value, "")
        self.assertEqual(len(self.session.reporter.failures), 1)
        self.assertIn("nonexistent.path", self.session.reporter.failures[0])

    def test_null_value_is_missing(self):
        self.assertEqual(self.session.get_response_json_value(self.response, "note"), "")
        self.assertEqual(len(self.session.reporter.failures), 1)

    def test_not_json(self):
        response = make_response("<html>oops</html>")
        self.assertEqual(self.session.get_response_json_value(response, "data"), "")
        self.assertEqual(len(self.session.reporter.failures), 1)

    def test_bad_path(self):
        self.assertEqual(self.session.get_response_json_value(self.response, "data..users"), "")
        self.assertEqual(len(self.session.reporter.failures), 1)

    def test_list(self):
        values = self.session.get_response_json_value_as_list(self.response, "data.users.name")
        self.assertEqual(values, ["Ann", "Bob"])

        values = self.session.get_response_json_value_as_list(self.response, "total")
        self.assertEqual(values, [2])

    def test_missing_list(self):
        """
        Returns the one element sentinel list
        """
        values = self.session.get_response_json_value_as_list(self.response, "data.groups")

        self.assertEqual(values, [""])
        self.assertEqual(len(self.session.reporter.failures), 1)

    def test_mapping(self):
        mapping = {"user": {"roles": ["admin", "editor"], "id": 5}}

        self.assertEqual(self.session.get_mapping_json_value(mapping, "user.roles[1]"), "editor")
        self.assertEqual(self.session.get_mapping_json_value(mapping, "user.id"), "5")
        self.assertEqual(self.session.get_mapping_json_value(mapping, "user.name"), "")
        self.assertEqual(len(self.session.reporter.failures), 1)

    def test_extracted_element_as_mapping(self):
        users = self.session.get_response_json_value_as_list(self.response, "data.users")
        self.assertEqual(self.session.get_mapping_json_value(users[1], "name"), "Bob")


class XMLExtractionTests(unittest.TestCase):
    def setUp(self):
        self.session = RequestSession("https://api.example.com", reporter=ReportManager())
        self.response = make_response(ORDER_BODY)

    def test_value(self):
        self.assertEqual(self.session.get_response_xml_value(self.response, "order.id"), "7")
        self.assertEqual(
            self.session.get_response_xml_value(self.response, "order.items.item[1].@sku"),
            "b2",
        )
        self.assertEqual(
            self.session.get_response_xml_value(self.response, "order.items.item[0]"),
            "Pen",
        )
        self.assertEqual(self.session.reporter.failures, [])

    def test_empty_element(self):
        self.assertEqual(self.session.get_response_xml_value(self.response, "order.comment"), "")
        self.assertEqual(self.session.reporter.failures, [])

    def test_missing_value(self):
        self.assertEqual(self.session.get_response_xml_value(self.response, "order.total"), "")
        self.assertEqual(len(self.session.reporter.failures), 1)

    def test_not_xml(self):
        response = make_response('{"order": 1}')
        self.assertEqual(self.session.get_response_xml_value(response, "order"), "")
        self.assertEqual(len(self.session.reporter.failures), 1)

    def test_list(self):
        self.assertEqual(
            self.session.get_response_xml_value_as_list(self.response, "order.items.item"),
            ["Pen", "Ink"],
        )
        self.assertEqual(
            self.session.get_response_xml_value_as_list(self.response, "order.items.item.@sku"),
            ["a1", "b2"],
        )
        self.assertEqual(
            self.session.get_response_xml_value_as_list(self.response, "order.id"), ["7"]
        )

    def test_missing_list(self):
        self.assertEqual(
            self.session.get_response_xml_value_as_list(self.response, "order.customer"), [""]
        )
        self.assertEqual(len(self.session.reporter.failures), 1)

    def test_mapping(self):
        mapping = {"order": {"@id": "9", "line": [{"sku": "a1"}, {"sku": "b2"}]}}

        self.assertEqual(self.session.get_mapping_xml_value(mapping, "order.@id"), "9")
        self.assertEqual(self.session.get_mapping_xml_value(mapping, "order.line[1].sku"), "b2")
        self.assertEqual(self.session.reporter.failures, [])


class MissingResponseTests(unittest.TestCase):
    """
    perform_request returns None when no request could be sent
    """

    def setUp(self):
        self.session = RequestSession("https://api.example.com", reporter=ReportManager())

    def test_values_default(self):
        self.assertEqual(self.session.get_response_json_value(None, "a"), "")
        self.assertEqual(self.session.get_response_xml_value(None, "a"), "")
        self.assertEqual(len(self.session.reporter.failures), 2)

    def test_lists_default(self):
        self.assertEqual(self.session.get_response_json_value_as_list(None, "a"), [""])
        self.assertEqual(self.session.get_response_xml_value_as_list(None, "a"), [""])
        self.assertEqual(len(self.session.reporter.failures), 2)

    def test_after_unsupported_method(self):
        response = self.session.perform_request("PUT", 200, "/x")

        self.assertEqual(self.session.get_response_json_value(response, "a"), "")
        self.assertEqual(len(self.session.reporter.failures), 2)


if __name__ == "__main__":
    pytest.main(sys.argv)
