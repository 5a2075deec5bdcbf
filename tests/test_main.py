from __future__ import annotations

import dataclasses

import pytest

from signlearn import main


def test_run_serves_on_configured_port(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, dict]] = []
    monkeypatch.setattr(
        main.uvicorn, "run", lambda target, **kw: calls.append((target, kw))
    )
    monkeypatch.setattr(
        main, "SETTINGS", dataclasses.replace(main.SETTINGS, port=5123, app_env="prod")
    )

    main.run()

    assert len(calls) == 1
    target, kwargs = calls[0]
    assert target == "signlearn.main:app"
    assert kwargs["port"] == 5123
    assert kwargs["reload"] is False
    assert kwargs["log_config"] is None
