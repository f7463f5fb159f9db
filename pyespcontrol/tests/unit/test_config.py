import pytest

from pyespcontrol.config import Settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    # keep a developer's .env or ESP_* variables out of the tests
    monkeypatch.chdir(tmp_path)
    for name in ("ESP_HOST", "ESP_DEBUG", "ESP_POLL_INTERVAL", "ESP_LED_SLAVE_ID", "ESP_BACKOFF_MAX"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = Settings()
    assert s.host == "192.168.4.1"
    assert s.timeout == 10
    assert s.probe_timeout == 5.0
    assert s.poll_interval == 10
    assert (s.backoff_initial, s.backoff_factor, s.backoff_max) == (1000, 1.5, 30000)
    assert s.restore_banner == 2000
    assert s.led_slave_id == 10
    assert s.initial_tab == "actuators"
    assert s.debug is False


def test_environment(monkeypatch):
    monkeypatch.setenv("ESP_HOST", "10.1.2.3")
    monkeypatch.setenv("ESP_DEBUG", "yes")
    monkeypatch.setenv("ESP_POLL_INTERVAL", "30")
    monkeypatch.setenv("ESP_LED_SLAVE_ID", "2")
    s = Settings()
    assert s.host == "10.1.2.3"
    assert s.debug is True
    assert s.poll_interval == 30
    assert s.led_slave_id == 2


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("ESP_HOST=esp32.local\nESP_BACKOFF_MAX=60000\n")
    s = Settings()
    assert s.host == "esp32.local"
    assert s.backoff_max == 60000


def test_keyword_arguments():
    assert Settings(host="10.0.0.7").host == "10.0.0.7"
