import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from rich.console import Console

from textaction.cli import build_parser, cmd_models, cmd_run, main, read_selection
from textaction.llm.transport import Success
from tests.fakes import RecordingSink, completion_body, fake_response


class ReadSelectionTests(unittest.TestCase):
    def test_argument_first(self):
        self.assertEqual(read_selection("arg", {"POPCLIP_TEXT": "env"}), "arg")

    def test_host_env_then_stdin(self):
        self.assertEqual(read_selection(None, {"POPCLIP_TEXT": "env"}), "env")
        stdin = io.StringIO("piped\n")
        self.assertEqual(read_selection(None, {}, stdin=stdin), "piped")


class RunCommandTests(unittest.TestCase):
    def setUp(self):
        self.err = Console(file=io.StringIO(), width=200)
        self.sink = RecordingSink()

    def _args(self, *argv):
        return build_parser().parse_args(["run", *argv])

    @mock.patch("textaction.llm.transport.requests.post")
    def test_flags_override_env(self, post):
        post.return_value = fake_response(200, json.dumps(completion_body("done")))
        env = {"TEXTACTION_API_KEY": "sk-env", "TEXTACTION_MODEL": "env/model", "TEXTACTION_RESPONSE_HANDLING": "show"}
        args = self._args("hello", "--mode", "replace", "--model", "flag/model", "--timeout-ms", "2000")
        code = cmd_run(args, env=env, sink=self.sink, err_console=self.err)

        self.assertEqual(code, 0)
        self.assertEqual(self.sink.calls, [("paste", "done")])
        kwargs = post.call_args[1]
        self.assertEqual(kwargs["json"]["model"], "flag/model")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer sk-env")
        self.assertEqual(kwargs["timeout"], 2.0)

    def test_missing_key_exits_1_and_reports(self):
        code = cmd_run(self._args("hello"), env={}, sink=self.sink, err_console=self.err)
        self.assertEqual(code, 1)
        self.assertIn("Settings error: API Key is required", self.err.file.getvalue())

    @mock.patch("textaction.cli.run_action")
    def test_events_file_written(self, run_action):
        def fake(text, options, sink, events=None, **kwargs):
            events.emit("reply.routed", {"mode": options.response_handling})
            return "ok"

        run_action.side_effect = fake
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "events.json"
            code = cmd_run(self._args("hi", "--events", str(path)), env={"TEXTACTION_API_KEY": "k"}, sink=self.sink, err_console=self.err)
            data = json.loads(path.read_text(encoding="utf-8"))
        self.assertEqual(code, 0)
        self.assertEqual(data["events"][0]["payload"], {"mode": "append"})

    @mock.patch("textaction.action.post_json")
    def test_verbose_echoes_events(self, post):
        post.return_value = Success(200, completion_body("x"))
        cmd_run(self._args("hi", "--verbose"), env={"TEXTACTION_API_KEY": "k"}, sink=self.sink, err_console=self.err)
        self.assertIn("request.start", self.err.file.getvalue())


class MainTests(unittest.TestCase):
    def test_requires_command(self):
        with self.assertRaises(SystemExit):
            main([])

    def test_rejects_unknown_mode(self):
        with self.assertRaises(SystemExit):
            main(["run", "hi", "--mode", "bogus"])

    @mock.patch("textaction.cli.render_models")
    @mock.patch("textaction.cli.fetch_models", return_value=[{"id": "a"}])
    def test_models_command(self, fetch, render):
        with mock.patch.dict("os.environ", {"TEXTACTION_API_KEY": " sk "}, clear=False):
            self.assertEqual(main(["models", "gpt"]), 0)
        self.assertEqual(fetch.call_args[0][0], "sk")
        self.assertEqual(render.call_args[0][:2], ([{"id": "a"}], "gpt"))

    @mock.patch("textaction.cli.render_models")
    @mock.patch("textaction.cli.fetch_models", return_value=[])
    def test_models_marks_configured_model(self, fetch, render):
        args = build_parser().parse_args(["models"])
        cmd_models(args, env={"TEXTACTION_MODEL": " openai/gpt-4.1 "})
        self.assertEqual(render.call_args[1]["selected_model"], "openai/gpt-4.1")
        cmd_models(args, env={"TEXTACTION_MODEL": "  "})
        self.assertEqual(render.call_args[1]["selected_model"], "google/gemini-3-flash-preview")


if __name__ == "__main__":
    unittest.main()
