"""Tests for environment configuration."""

import pytest

from epropulse.clients import ContentStoreClient
from epropulse.config import load_store_config


class TestLoadStoreConfig:
    """Tests for load_store_config()."""

    def test_requires_url(self):
        """A missing store URL raises ValueError."""
        with pytest.raises(ValueError, match="EPROPULSE_STORE_URL"):
            load_store_config({})

    def test_minimal(self):
        """Only the URL and user agent when nothing else is set."""
        config = load_store_config({"EPROPULSE_STORE_URL": "https://project.example.co"})

        assert config == {
            "base_url": "https://project.example.co",
            "headers": {"User-Agent": "epropulse/1.0"},
        }

    def test_full(self):
        """Key and timeout are picked up."""
        config = load_store_config({
            "EPROPULSE_STORE_URL": "https://project.example.co",
            "EPROPULSE_STORE_KEY": "anon",
            "EPROPULSE_STORE_TIMEOUT": "12.5",
        })

        assert config["api_key"] == "anon"
        assert config["timeout"] == 12.5

    def test_reads_process_environment(self, monkeypatch):
        """Defaults to os.environ."""
        monkeypatch.setenv("EPROPULSE_STORE_URL", "https://env.example.co")

        assert load_store_config()["base_url"] == "https://env.example.co"

    def test_usable_by_client(self):
        """The config builds a ContentStoreClient."""
        config = load_store_config({
            "EPROPULSE_STORE_URL": "https://project.example.co/",
            "EPROPULSE_STORE_KEY": "anon",
        })

        client = ContentStoreClient(config)

        assert client.base_url == "https://project.example.co"
        assert client.headers["apikey"] == "anon"
        assert client.headers["User-Agent"] == "epropulse/1.0"
