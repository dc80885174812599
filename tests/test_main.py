"""Tests for the healthprobe CLI."""

from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

import httpx
import pytest

from healthprobe.main import main, run_probe


def _client(mock_client_cls: MagicMock) -> MagicMock:
    return mock_client_cls.return_value.__enter__.return_value


class TestRunProbe:
    @patch("healthprobe.main.httpx.Client")
    def test_healthy_exit_zero(self, mock_client_cls) -> None:
        _client(mock_client_cls).get.return_value = MagicMock(status_code=200, text="{}\n")
        assert run_probe("http://localhost:8000/ready") == 0
        _client(mock_client_cls).get.assert_called_once_with(
            "http://localhost:8000/ready", params=None,
        )

    @patch("healthprobe.main.httpx.Client")
    def test_unavailable_exit_one(self, mock_client_cls) -> None:
        _client(mock_client_cls).get.return_value = MagicMock(status_code=503, text="{}\n")
        assert run_probe("http://localhost:8000/ready") == 1

    @patch("healthprobe.main.httpx.Client")
    def test_full_requests_details(self, mock_client_cls, capsys) -> None:
        body = '{\n    "checks": {\n        "db": "timeout"\n    }\n}\n'
        _client(mock_client_cls).get.return_value = MagicMock(status_code=503, text=body)
        assert run_probe("http://localhost:8000/live", full=True) == 1
        _client(mock_client_cls).get.assert_called_once_with(
            "http://localhost:8000/live", params={"full": "1"},
        )
        assert '"db": "timeout"' in capsys.readouterr().out

    @patch("healthprobe.main.httpx.Client")
    def test_unreachable_exit_one(self, mock_client_cls, capsys) -> None:
        _client(mock_client_cls).get.side_effect = httpx.ConnectError("refused")
        assert run_probe("http://localhost:1/live") == 1
        assert "unreachable" in capsys.readouterr().out


class TestMain:
    def test_no_command_prints_help(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(sys, "argv", ["healthprobe"])
        with pytest.raises(SystemExit) as exc:
            main()
        assert exc.value.code == 1

    def test_probe_command(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(sys, "argv", ["healthprobe", "probe", "http://x/live", "--timeout", "2"])
        with patch("healthprobe.main.run_probe", return_value=0) as mock_probe:
            with pytest.raises(SystemExit) as exc:
                main()
        assert exc.value.code == 0
        mock_probe.assert_called_once_with("http://x/live", full=False, timeout=2.0)

    def test_serve_command(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(sys, "argv", ["healthprobe", "serve"])
        with patch("healthprobe.main.uvicorn.run") as mock_run:
            main()
        assert mock_run.call_args.args == ("healthprobe.api.server:create_app",)
        assert mock_run.call_args.kwargs["factory"] is True
