import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

from candidkit.cli import main
from candidkit.constants import DEFAULT_EXAMPLE_PRINCIPAL


_TOKEN_DID = """
type Account = record { owner : principal; subaccount : opt blob };
type TransferArgs = record { to : Account; amount : nat };
service : {
    transfer : (TransferArgs) -> (variant { Ok : nat; Err : text });
    balance : (Account) -> (nat) query;
    ping : () -> () query;
}
"""


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        root = Path(self._tmp.name)
        self.did = root / "token.did"
        self.did.write_text(_TOKEN_DID)
        self.config = root / "config.toml"

    def _run(self, *argv: str) -> tuple:
        out = io.StringIO()
        with redirect_stdout(out):
            rc = main(["--config", str(self.config), *argv])
        return rc, out.getvalue()

    def test_methods(self) -> None:
        rc, out = self._run("methods", str(self.did))
        self.assertEqual(rc, 0)
        lines = out.splitlines()
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[0].startswith("transfer"))
        self.assertIn("update", lines[0])
        self.assertIn("query", lines[1])
        self.assertIn("(Account) -> (nat) query", lines[1])

    def test_methods_json(self) -> None:
        rc, out = self._run("methods", str(self.did), "--json")
        self.assertEqual(rc, 0)
        data = json.loads(out)
        self.assertEqual([m["name"] for m in data], ["transfer", "balance", "ping"])
        self.assertEqual(data[1]["kind"], "query")

    def test_resolve(self) -> None:
        rc, out = self._run("resolve", str(self.did), "transfer")
        self.assertEqual(rc, 0)
        self.assertEqual(
            out.strip(),
            "arg0: record { to : record { owner : principal; subaccount : opt blob }; amount : nat }",
        )

    def test_resolve_without_arguments(self) -> None:
        rc, out = self._run("resolve", str(self.did), "ping")
        self.assertEqual(rc, 0)
        self.assertEqual(out.strip(), "(no arguments)")

    def test_resolve_json(self) -> None:
        rc, out = self._run("resolve", str(self.did), "balance", "--json")
        self.assertEqual(rc, 0)
        self.assertEqual(json.loads(out), ["record { owner : principal; subaccount : opt blob }"])

    def test_example(self) -> None:
        rc, out = self._run("example", str(self.did), "transfer")
        self.assertEqual(rc, 0)
        self.assertEqual(
            json.loads(out),
            {"to": {"owner": DEFAULT_EXAMPLE_PRINCIPAL, "subaccount": None}, "amount": 0},
        )

    def test_example_uses_config(self) -> None:
        rc, _ = self._run("config", "set", "example.indent", "0")
        self.assertEqual(rc, 0)
        rc, out = self._run("example", str(self.did), "balance")
        self.assertEqual(rc, 0)
        self.assertEqual(out.strip(), f'{{"owner": "{DEFAULT_EXAMPLE_PRINCIPAL}", "subaccount": null}}')

    def test_validate_ok(self) -> None:
        rc, out = self._run(
            "validate", str(self.did), "transfer",
            "--args", '{"to": {"owner": "aaaaa-aa"}, "amount": 5}',
        )
        self.assertEqual(rc, 0)
        self.assertEqual(out.strip(), "Arguments valid")

    def test_validate_failure(self) -> None:
        rc, out = self._run(
            "validate", str(self.did), "transfer",
            "--args", '{"to": {"owner": 1}, "amount": "lots"}',
        )
        self.assertEqual(rc, 1)
        self.assertIn("Argument validation failed:", out)
        self.assertIn("- (root).to.owner expected principal text", out)
        self.assertIn("- (root).amount expected number or numeric string", out)

    def test_validate_failure_json_lines(self) -> None:
        rc, out = self._run(
            "validate", str(self.did), "balance", "--json", "--args", "{}",
        )
        self.assertEqual(rc, 1)
        self.assertEqual(out.strip(), "ERROR: (root) missing field owner")

    def test_unparseable_arguments_fail_cleanly(self) -> None:
        for text in ("NaN", "[" * 100000 + "]" * 100000):
            for cmd in ("validate", "encode"):
                with self.subTest(cmd=cmd, text=text[:10]):
                    rc, out = self._run(cmd, str(self.did), "balance", "--args", text)
                    self.assertEqual(rc, 1)
                    self.assertIn("Invalid JSON", out)

    def test_validate_args_file(self) -> None:
        args_file = Path(self._tmp.name) / "args.json"
        args_file.write_text('{"owner": "aaaaa-aa"}')
        rc, out = self._run("validate", str(self.did), "balance", "--args-file", str(args_file))
        self.assertEqual(rc, 0)
        self.assertEqual(out.strip(), "Arguments valid")

    def test_validate_args_from_stdin(self) -> None:
        with patch("sys.stdin", io.StringIO('{"owner": "aaaaa-aa"}')):
            rc, out = self._run("validate", str(self.did), "balance", "--args-file", "-")
        self.assertEqual(rc, 0)

    def test_missing_args_file(self) -> None:
        rc, out = self._run("validate", str(self.did), "balance", "--args-file", "/nonexistent/args.json")
        self.assertEqual(rc, 1)
        self.assertIn("Arguments file not found", out)

    def test_encode(self) -> None:
        rc, out = self._run("encode", str(self.did), "balance", "--args", '{"owner": "aaaaa-aa"}')
        self.assertEqual(rc, 0)
        self.assertEqual(out.strip(), '(record { owner = principal "aaaaa-aa"; subaccount = null })')

    def test_encode_rejects_invalid_arguments(self) -> None:
        rc, out = self._run("encode", str(self.did), "balance", "--args", '{"owner": 5}')
        self.assertEqual(rc, 1)
        self.assertIn("(root).owner expected principal text", out)

    def test_encode_without_arguments(self) -> None:
        rc, out = self._run("encode", str(self.did), "ping")
        self.assertEqual(rc, 0)
        self.assertEqual(out.strip(), "()")

    def test_unknown_method(self) -> None:
        rc, out = self._run("resolve", str(self.did), "nope")
        self.assertEqual(rc, 1)
        self.assertIn("Unknown method: nope", out)
        self.assertIn("transfer, balance, ping", out)

    def test_missing_candid_file(self) -> None:
        rc, out = self._run("methods", str(Path(self._tmp.name) / "missing.did"))
        self.assertEqual(rc, 1)
        self.assertIn("Candid file not found", out)

    def test_config_show_and_set(self) -> None:
        rc, out = self._run("config", "set", "resolver.max_depth", "8")
        self.assertEqual(rc, 0)
        self.assertEqual(out.strip(), "Set resolver.max_depth = 8")
        rc, out = self._run("config", "show")
        self.assertEqual(rc, 0)
        self.assertIn("[resolver]", out)
        self.assertIn("max_depth = 8", out)
        self.assertIn(f'principal = "{DEFAULT_EXAMPLE_PRINCIPAL}"', out)

    def test_config_set_rejects_unknown_key(self) -> None:
        rc, out = self._run("config", "set", "example.colour", "red")
        self.assertEqual(rc, 1)
        self.assertIn("Unknown config key: example.colour", out)

    def test_invalid_config_file_fails_commands(self) -> None:
        self.config.write_text("[resolver]\nmax_depth = -1\n")
        rc, out = self._run("resolve", str(self.did), "transfer")
        self.assertEqual(rc, 1)
        self.assertIn("resolver.max_depth must be a positive integer", out)

    def test_tui_is_launched_with_paths(self) -> None:
        with patch("candidkit.tui.launch_tui", return_value=0) as launch:
            rc, _ = self._run("tui", str(self.did))
        self.assertEqual(rc, 0)
        launch.assert_called_once_with(self.did, config=str(self.config))


if __name__ == "__main__":
    unittest.main()
