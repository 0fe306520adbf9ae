"""
Tests for application settings.
"""

import pytest
from pydantic import ValidationError

from app.core.config import Settings


class TestSettings:
    def test_cors_origins_parsed(self):
        settings = Settings(cors_origins="http://a.test, http://b.test ,")

        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_environment_flags(self):
        settings = Settings(python_env="Production", jwt_secret_key="a-real-secret")

        assert settings.is_production
        assert not settings.is_development

    def test_production_requires_secret(self):
        with pytest.raises(ValidationError):
            Settings(python_env="production")
