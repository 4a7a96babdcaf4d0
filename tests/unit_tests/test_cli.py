"""
Unit tests for CLI module.
"""

import io
import os
import unittest
from contextlib import redirect_stdout
from unittest.mock import MagicMock, patch

import requests

from cli import build_parser, main


class TestBuildParser(unittest.TestCase):
    """Test CLI argument parsing."""

    def test_parser_defaults(self):
        """Test parser defaults without any arguments."""
        args = build_parser().parse_args([])

        self.assertEqual(args.project, "")
        self.assertEqual(args.region, "us-central1")
        self.assertEqual(args.output, "table")
        self.assertFalse(args.verbose)
        self.assertIsNone(args.command)
        self.assertEqual(args.args, [])

    def test_parser_with_global_options(self):
        """Test parser handles global options before the command."""
        args = build_parser().parse_args(
            ["-p", "test-project", "-r", "europe-west2", "--output", "json", "list"]
        )

        self.assertEqual(args.project, "test-project")
        self.assertEqual(args.region, "europe-west2")
        self.assertEqual(args.output, "json")
        self.assertEqual(args.command, "list")

    def test_parser_passes_deploy_options_through(self):
        """Test subcommand options are left for the deploy parser."""
        args = build_parser().parse_args(
            ["-p", "test-project", "deploy", "hello", "-e", "dev", "-v", "2", "-c"]
        )

        self.assertEqual(args.command, "deploy")
        self.assertEqual(args.args, ["hello", "-e", "dev", "-v", "2", "-c"])

    def test_options_after_command_belong_to_command(self):
        """Test global flags after COMMAND are passed through, not parsed."""
        args = build_parser().parse_args(["deploy", "hello", "--verbose"])

        self.assertFalse(args.verbose)
        self.assertEqual(args.args, ["hello", "--verbose"])

    def test_help_documents_option_order(self):
        """Test the help text says global options precede COMMAND."""
        help_text = build_parser().format_help()
        self.assertIn("Global options must come before COMMAND", help_text)

    def test_help_exits_zero(self):
        """Test -h prints help and exits 0."""
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                build_parser().parse_args(["-h"])
        self.assertEqual(ctx.exception.code, 0)


@patch.dict(os.environ, {"GCP_PROJECT_ID": "env-project"})
@patch("cli.setup_logging")
class TestMain(unittest.TestCase):
    """Test the CLI entry point dispatch."""

    def test_no_command_prints_usage(self, mock_setup_logging):
        out = io.StringIO()
        with redirect_stdout(out):
            result = main([])

        self.assertEqual(result, 0)
        self.assertIn("usage:", out.getvalue())
        mock_setup_logging.assert_not_called()

    def test_unknown_command_prints_usage(self, mock_setup_logging):
        out = io.StringIO()
        with redirect_stdout(out):
            result = main(["frobnicate"])

        self.assertEqual(result, 1)
        self.assertIn("Unknown command: frobnicate", out.getvalue())
        self.assertIn("usage:", out.getvalue())

    @patch.dict(os.environ, {}, clear=True)
    def test_unknown_command_without_project(self, mock_setup_logging):
        with redirect_stdout(io.StringIO()):
            result = main(["frobnicate"])
        self.assertEqual(result, 1)

    @patch.dict(os.environ, {}, clear=True)
    @patch("cli.CloudFunctionsRestClient")
    def test_missing_project_is_usage_error(self, mock_client_class, mock_setup_logging):
        with patch("sys.stderr", new_callable=io.StringIO) as err:
            with self.assertRaises(SystemExit) as ctx:
                main(["list"])

        self.assertNotEqual(ctx.exception.code, 0)
        self.assertIn("Project ID required", err.getvalue())
        mock_client_class.assert_not_called()

    @patch("cli.FunctionDeployer")
    def test_deploy_requires_function_name(self, mock_deployer_class, mock_setup_logging):
        with patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                main(["deploy"])
        mock_deployer_class.assert_not_called()

    @patch("cli.describe_function")
    @patch("cli.CloudFunctionsRestClient")
    def test_describe_requires_function_name(
        self, mock_client_class, mock_describe, mock_setup_logging
    ):
        with patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                main(["describe"])
        mock_client_class.assert_not_called()

    @patch("cli.FunctionDeployer")
    def test_deploy_dispatch(self, mock_deployer_class, mock_setup_logging):
        mock_deployer = MagicMock()
        mock_deployer_class.return_value = mock_deployer

        result = main(["-r", "europe-west2", "deploy", "hello", "-e", "dev"])

        self.assertEqual(result, 0)
        config = mock_deployer_class.call_args[0][0]
        self.assertEqual(config.project_id, "env-project")
        self.assertEqual(config.region, "europe-west2")
        mock_deployer.deploy.assert_called_once_with("hello", ["-e", "dev"])

    @patch("cli.FunctionDeployer")
    def test_deploy_failure_returns_one(self, mock_deployer_class, mock_setup_logging):
        mock_deployer_class.return_value.deploy.side_effect = RuntimeError(
            "Deployment failed"
        )

        with self.assertLogs("cli", level="ERROR"):
            result = main(["deploy", "hello"])

        self.assertEqual(result, 1)

    @patch("cli.describe_function")
    @patch("cli.CloudFunctionsRestClient")
    def test_describe_dispatch(self, mock_client_class, mock_describe, mock_setup_logging):
        client = mock_client_class.return_value.__enter__.return_value

        result = main(["-p", "flag-project", "describe", "hello"])

        self.assertEqual(result, 0)
        mock_client_class.assert_called_once_with("flag-project")
        config = mock_describe.call_args[0][0]
        self.assertEqual(config.project_id, "flag-project")
        self.assertIs(mock_describe.call_args[0][1], client)
        self.assertEqual(mock_describe.call_args[0][2], "hello")
        mock_client_class.return_value.__exit__.assert_called_once()

    @patch("cli.list_functions")
    @patch("cli.CloudFunctionsRestClient")
    def test_list_dispatch(self, mock_client_class, mock_list, mock_setup_logging):
        result = main(["--output", "json", "list"])

        self.assertEqual(result, 0)
        config = mock_list.call_args[0][0]
        self.assertEqual(config.output, "json")
        mock_client_class.return_value.__exit__.assert_called_once()

    @patch("cli.list_functions")
    @patch("cli.CloudFunctionsRestClient")
    def test_list_failure_returns_one(
        self, mock_client_class, mock_list, mock_setup_logging
    ):
        mock_list.side_effect = RuntimeError("Failed to list functions (403)")

        with self.assertLogs("cli", level="ERROR") as logs:
            result = main(["list"])

        self.assertEqual(result, 1)
        self.assertIn("403", logs.output[0])
        mock_client_class.return_value.__exit__.assert_called_once()

    @patch("cli.CloudFunctionsRestClient")
    def test_client_creation_failure_returns_one(
        self, mock_client_class, mock_setup_logging
    ):
        mock_client_class.side_effect = RuntimeError("Failed to create client")

        with self.assertLogs("cli", level="ERROR"):
            result = main(["describe", "hello"])

        self.assertEqual(result, 1)


@patch.dict(os.environ, {"GCP_PROJECT_ID": "env-project"})
@patch("cli.setup_logging")
@patch("clients.AuthorizedSession")
@patch("google.auth.default", return_value=(MagicMock(), None))
class TestMainMalformedResponses(unittest.TestCase):
    """Test malformed API responses end on the fatal path or degrade."""

    def _serve(self, mock_session_class, resp):
        mock_session_class.return_value.get.return_value = resp

    def test_describe_non_json_body_returns_one(
        self, mock_auth, mock_session_class, mock_setup_logging
    ):
        resp = MagicMock()
        resp.status_code = 200
        resp.text = "<html>gateway</html>"
        resp.json.side_effect = requests.exceptions.JSONDecodeError(
            "Expecting value", "<html>gateway</html>", 0
        )
        self._serve(mock_session_class, resp)

        with redirect_stdout(io.StringIO()) as out:
            with self.assertLogs("cli", level="ERROR") as logs:
                result = main(["describe", "hello"])

        self.assertEqual(result, 1)
        self.assertIn("Malformed response", logs.output[0])
        self.assertEqual(out.getvalue(), "")
        mock_session_class.return_value.close.assert_called_once()

    def test_list_bad_update_time_shows_na(
        self, mock_auth, mock_session_class, mock_setup_logging
    ):
        resp = MagicMock()
        resp.status_code = 200
        resp.json.return_value = {
            "functions": [{"name": "a", "status": "ACTIVE", "updateTime": "garbage"}]
        }
        self._serve(mock_session_class, resp)

        with redirect_stdout(io.StringIO()) as out:
            result = main(["list"])

        self.assertEqual(result, 0)
        row = out.getvalue().splitlines()[-1]
        self.assertTrue(row.startswith("a "))
        self.assertTrue(row.endswith("n/a"))


if __name__ == "__main__":
    unittest.main()
