import argparse
import getpass
import json
import logging
import sys

import configargparse
import keyring
from pandas import json_normalize

from restsession import constants
from restsession.api import extract_values, perform_request
from restsession.content import ContentType
from restsession.reporting import ReportManager

logger = logging.getLogger("restsession")


def parse_form_parameter(text):
    name, separator, value = text.partition("=")
    if not separator:
        raise argparse.ArgumentTypeError(
            "form parameters must look like name=value, got [{}]".format(text)
        )
    return (name, value)


def parse_arguments(args):
    ARGUMENTS = [
        (
            ("method",),
            {
                "nargs": "?",
                "default": None,
                "help": "Request method, one of POST, PATCH, GET or DELETE",
            },
        ),
        (
            ("expected_status",),
            {
                "nargs": "?",
                "default": "200",
                "help": "Status code the API is expected to answer with. Default is 200.",
            },
        ),
        (
            ("base_uri",),
            {
                "nargs": "?",
                "default": None,
                "help": "Base URI of the API, e.g. https://api.example.com",
            },
        ),
        (
            ("resource_path",),
            {
                "nargs": "?",
                "default": "",
                "help": "Path of the resource appended to the base URI, e.g. /users",
            },
        ),
        (
            ("--body",),
            {
                "default": None,
                "help": "Request body, sent as is",
            },
        ),
        (
            ("--body-file",),
            {
                "default": None,
                "help": "Read the request body from this file. Ignored if --body is given.",
            },
        ),
        (
            ("--config-file", "-c"),
            {
                "required": False,
                "is_config_file": True,
                "help": "The path to the config file used.",
            },
        ),
        (
            ("--content-type",),
            {
                "choices": [member.name.lower() for member in ContentType],
                "default": None,
                "help": "Content type of the request body",
            },
        ),
        (
            ("--discrete-logging",),
            {
                "action": "store_true",
                "default": False,
                "help": "Only log a summary line for passed steps",
            },
        ),
        (
            ("--filename", "-f"),
            {
                "help": "write results to file. can be {csv,json} format. default is to write to stdout."
            },
        ),
        (
            ("--form",),
            {
                "action": "append",
                "type": parse_form_parameter,
                "default": [],
                "dest": "form_parameters",
                "help": "Form parameter as name=value, may be repeated",
            },
        ),
        (
            ("--format",),
            {
                "choices": [constants.JSON_FORMAT, constants.CSV_FORMAT],
                "default": constants.JSON_FORMAT,
                "help": "The format used to return data.",
            },
        ),
        (
            ("--json-path",),
            {
                "action": "append",
                "default": [],
                "dest": "json_paths",
                "help": "Extract this JSON path from the response, may be repeated",
            },
        ),
        (
            ("--keyring",),
            {
                "action": "store_true",
                "help": "Use OS keyring for storing password information",
            },
        ),
        (
            ("--log-level",),
            {
                "choices": ["DEBUG", "INFO", "WARNING", "ERROR"],
                "default": "INFO",
                "help": "Logging verbosity. Default is INFO.",
            },
        ),
        (
            ("--password",),
            {
                "default": None,
                "help": "Password for Basic authentication. Prompted for if --username is given without it.",
            },
        ),
        (
            ("--query",),
            {
                "default": None,
                "help": "Query string without the leading '?', e.g. page=1&size=20",
            },
        ),
        (
            ("--timeout",),
            {
                "type": float,
                "default": None,
                "help": "Seconds to wait for the API to answer. Default is to wait forever.",
            },
        ),
        (
            ("--username",),
            {
                "default": None,
                "help": "Username for Basic authentication",
            },
        ),
        (
            ("--xml-path",),
            {
                "action": "append",
                "default": [],
                "dest": "xml_paths",
                "help": "Extract this XML path from the response, may be repeated",
            },
        ),
    ]

    # Parse command-line arguments {{{
    cmdline = configargparse.ArgumentParser()

    for argument_commands, argument_options in ARGUMENTS:
        cmdline.add_argument(*argument_commands, **argument_options)

    return cmdline.parse_args(args)


def handle_password(type, prompt, username, password, use_keyring=False):
    if use_keyring and not password:
        # If we don't yet have a password, try prompting for it
        password = keyring.get_password(type, username)

    if not password:
        # If we still don't have a password, prompt for it
        password = getpass.getpass(prompt)

    if use_keyring:
        # If keyring option is specified, save the password in the keyring
        keyring.set_password(type, username, password)

    return password


def read_body(options):
    if options.body is not None:
        return options.body
    if options.body_file is not None:
        with open(options.body_file, "r") as f:
            return f.read()
    return None


def format_filename(options):
    if options.filename is None:
        filename = None
    else:
        filename = "{}.{}".format(options.filename, options.format)
    return filename


def output_data(options, data):
    filename = format_filename(options)
    if filename is None:
        if options.format == constants.CSV_FORMAT:
            print(json_normalize(data).to_csv(index=False))
        else:
            print(json.dumps(data, indent=2))
    elif options.format == constants.CSV_FORMAT:
        json_normalize(data).to_csv(filename, index=False)
    elif options.format == constants.JSON_FORMAT:
        with open(filename, "w+") as f:
            json.dump(data, f, indent=2)


def main(args=None):
    options = parse_arguments(sys.argv[1:] if args is None else args)
    logging.basicConfig(
        level=options.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    method = options.method
    base_uri = options.base_uri

    if not method:
        method = input("Request method: ")
    if not base_uri:
        base_uri = input("Base URI: ")

    credentials = None
    if options.username:
        password = handle_password(
            "restsession",
            "Password: ",
            options.username,
            options.password,
            options.keyring,
        )
        credentials = (options.username, password)

    reporter = ReportManager(discrete_logging=options.discrete_logging)
    session, response = perform_request(
        base_uri,
        method,
        options.expected_status,
        options.resource_path,
        reporter=reporter,
        timeout=options.timeout,
        query_arguments=options.query,
        form_parameters=options.form_parameters,
        body=read_body(options),
        content_type=ContentType.from_name(options.content_type),
        credentials=credentials,
    )

    data = {
        "status_code": None if response is None else response.status_code,
        "values": extract_values(
            session, response, json_paths=options.json_paths, xml_paths=options.xml_paths
        ),
        "failures": list(reporter.failures),
    }
    output_data(options, data)

    if reporter.failed:
        logger.error("%d action(s) failed", len(reporter.failures))
        sys.exit(1)
