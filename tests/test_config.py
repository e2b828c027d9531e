import pytest

from app.core.config import Settings
from app.core.exceptions import ConfigurationError


def make_settings(**overrides):
    values = {"MONGODB_URI": "mongodb://localhost:27017", "DATABASE_NAME": "college_notices"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestValidateRequired:

    def test_complete_configuration(self):
        make_settings().validate_required()

    @pytest.mark.parametrize("name", ["MONGODB_URI", "DATABASE_NAME", "UPLOAD_DIR"])
    def test_missing_required_value(self, name):
        with pytest.raises(ConfigurationError, match=name):
            make_settings(**{name: "  "}).validate_required()

    def test_non_positive_ceiling(self):
        with pytest.raises(ConfigurationError):
            make_settings(MAX_UPLOAD_SIZE=0).validate_required()

    def test_relative_url_prefix(self):
        with pytest.raises(ConfigurationError):
            make_settings(UPLOAD_URL_PREFIX="uploads").validate_required()

    def test_defaults(self):
        s = make_settings()
        assert s.MAX_UPLOAD_SIZE == 10 * 1024 * 1024
        assert s.MAX_VIDEO_UPLOAD_SIZE == 45 * 1024 * 1024
        assert s.NOTICES_COLLECTION == "notices"
        assert s.UPLOAD_URL_PREFIX == "/uploads"
