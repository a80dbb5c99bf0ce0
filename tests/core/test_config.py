# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import pytest

from app.core.config import Settings, settings


@pytest.mark.unit
class TestSettings:
    """Test configuration settings"""

    def test_default_settings(self):
        """Test default settings values"""
        s = Settings()

        assert s.PROJECT_NAME == "Task Manager Backend"
        assert s.API_PREFIX == "/api"
        assert s.ALGORITHM == "HS256"
        assert s.ACCESS_TOKEN_EXPIRE_MINUTES == 10080  # 7 days
        assert s.DEFAULT_CATEGORY_COLOR == "#6366f1"
        assert s.MAX_TAGS_PER_TASK == 10
        assert s.MAX_BULK_UPDATE_ITEMS == 50

    def test_settings_from_env_variables(self, monkeypatch):
        """Test loading settings from environment variables"""
        monkeypatch.setenv("PROJECT_NAME", "Test Project")
        monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120")
        monkeypatch.setenv("ENABLE_API_DOCS", "false")
        monkeypatch.setenv("DB_POOL_TIMEOUT", "5")

        s = Settings()

        assert s.PROJECT_NAME == "Test Project"
        assert s.ACCESS_TOKEN_EXPIRE_MINUTES == 120
        assert s.ENABLE_API_DOCS is False
        assert s.DB_POOL_TIMEOUT == 5

    def test_cors_origin_list_splits_and_strips(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://app.example.com ,")

        s = Settings()

        assert s.cors_origin_list == [
            "http://localhost:3000",
            "https://app.example.com",
        ]

    def test_empty_cors_origins_allows_all(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "  ")

        assert Settings().cors_origin_list == ["*"]

    def test_test_environment_is_loaded(self):
        """conftest points the app at an in-memory database"""
        assert settings.DATABASE_URL == "sqlite://"
        assert settings.DB_AUTO_MIGRATE is False
