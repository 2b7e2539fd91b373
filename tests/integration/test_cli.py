"""
Integration tests for CLI commands
"""

from unittest.mock import MagicMock, patch

import pytest

from sentichat.cli import main


def make_response(body, status_code=200):
    response = MagicMock()
    response.ok = 200 <= status_code < 300
    response.status_code = status_code
    response.text = ""
    response.json.return_value = body
    return response


@pytest.fixture
def config_file(tmp_path):
    return str(tmp_path / "config.json")


class TestAnalyzeCommand:
    def test_prints_verdict(self, config_file, capsys):
        with patch("requests.get") as mock_get:
            mock_get.return_value = make_response({"label": "Positive", "score": 0.5})

            code = main(['analyze', 'c1', '--url', 'http://chat.test', '--config', config_file])

        assert code == 0
        out = capsys.readouterr().out
        assert "Label:   Positive" in out
        assert "Score:   0.5000" in out
        assert "Summary: No summary available." in out
        assert mock_get.call_args.args[0] == "http://chat.test/api/analyze"

    def test_server_error(self, config_file, capsys):
        with patch("requests.get") as mock_get:
            mock_get.return_value = make_response({"error": "boom"}, status_code=500)

            code = main(['analyze', 'c1', '--config', config_file])

        assert code == 1
        assert "Error:" in capsys.readouterr().out


class TestHistoryCommand:
    def test_lists_conversations(self, config_file, capsys):
        with patch("requests.get") as mock_get:
            mock_get.return_value = make_response([
                {"id": "c1", "created_at": "2024-01-01T00:00:00Z", "last_message": "hello there"},
            ])

            code = main(['history', '--config', config_file])

        assert code == 0
        out = capsys.readouterr().out
        assert "hello there" in out
        assert "2024-01-01" in out

    def test_unreachable_server(self, config_file, capsys):
        import requests

        with patch("requests.get", side_effect=requests.exceptions.ConnectionError()):
            code = main(['history', '--config', config_file])

        assert code == 1
        assert "Cannot connect" in capsys.readouterr().out


class TestShowCommand:
    def test_prints_transcript(self, config_file, capsys):
        with patch("requests.get") as mock_get:
            mock_get.return_value = make_response([
                {"sender": "user", "text": "I love this", "sentiment": "Positive"},
                {"sender": "bot", "text": "**Great!**"},
            ])

            code = main(['show', 'c1', '--config', config_file])

        assert code == 0
        out = capsys.readouterr().out
        assert "I love this" in out
        assert "[Positive]" in out
        assert "Great!" in out
        assert mock_get.call_args.args[0] == "http://localhost:5000/api/history/c1"

    def test_renders_through_controller_transcript(self, config_file):
        from sentichat import cli

        built = []

        def build_controller(backend, cfg):
            controller = original(backend, cfg)
            built.append(controller)
            return controller

        original = cli.build_controller
        with patch("requests.get") as mock_get, \
                patch.object(cli, "build_controller", side_effect=build_controller):
            mock_get.return_value = make_response([
                {"sender": "user", "text": "I love this", "sentiment": "Positive"},
                {"sender": "bot", "text": "**Great!**"},
            ])

            code = main(['show', 'c1', '--config', config_file])

        assert code == 0
        transcript = built[0].transcript
        assert [t.text for t in transcript.turns] == ["I love this", "**Great!**"]
        assert transcript.turns[0].badge.label == "Positive"


class TestChatCommand:
    def test_refuses_unreachable_server(self, config_file, capsys):
        import requests

        with patch("requests.get", side_effect=requests.exceptions.ConnectionError()):
            code = main(['chat', '--config', config_file])

        assert code == 1
        assert "Cannot connect to chat server" in capsys.readouterr().out

    def test_default_command_is_chat(self):
        with patch("sentichat.cli.cmd_chat", return_value=0) as mock_chat:
            assert main([]) == 0

        mock_chat.assert_called_once()
        assert mock_chat.call_args.args[0].command == 'chat'
