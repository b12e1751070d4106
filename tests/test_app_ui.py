import json
import logging

from streamlit.testing.v1 import AppTest

from budgetkollen.config import get_settings


def full_app():
    import app

    app.main()


def test_app_runs_and_saves_session(tmp_path, monkeypatch):
    file = tmp_path / "session.json"
    monkeypatch.setenv("BUDGETKOLLEN_SESSION_FILE", str(file))
    get_settings.cache_clear()
    root = logging.getLogger()
    old_handlers, old_level = root.handlers[:], root.level
    try:
        at = AppTest.from_function(full_app)
        at.run()
        assert not at.exception
        assert at.title[0].value.startswith("BudgetKollen")
        data = json.loads(file.read_text())
        assert set(data) == {"loan_parameters", "income", "expenses"}
        assert data["loan_parameters"]["interest_rates"] == [3.5]
    finally:
        root.handlers = old_handlers
        root.setLevel(old_level)
        get_settings.cache_clear()
