import copy

import pytest

from keyrotor.config.loader import DEFAULTS
from keyrotor.config.validator import validate_config, ValidationError


@pytest.fixture
def valid_config():
    config = copy.deepcopy(DEFAULTS)
    config["keys"]["secret"] = "abc"
    return config


@pytest.mark.unit
def test_valid_config_passes(valid_config):
    validate_config(valid_config)


@pytest.mark.unit
def test_missing_secret(valid_config):
    del valid_config["keys"]["secret"]
    with pytest.raises(ValidationError, match="keys.secret is required"):
        validate_config(valid_config)


@pytest.mark.unit
@pytest.mark.parametrize("length", [0, -1, 257, "16", 1.5, True])
def test_bad_fragment_length(valid_config, length):
    valid_config["keys"]["fragment_length"] = length
    with pytest.raises(ValidationError, match="fragment_length"):
        validate_config(valid_config)


@pytest.mark.unit
def test_names_must_be_bare(valid_config):
    valid_config["artifacts"]["alias"] = "../latest.json"
    with pytest.raises(ValidationError, match="artifacts.alias must be a bare file name"):
        validate_config(valid_config)


@pytest.mark.unit
def test_empty_prefix(valid_config):
    valid_config["artifacts"]["prefix"] = ""
    with pytest.raises(ValidationError, match="artifacts.prefix"):
        validate_config(valid_config)


@pytest.mark.unit
def test_names_must_be_distinct(valid_config):
    valid_config["keys"]["previous_file"] = "key_b.txt"
    with pytest.raises(ValidationError, match="distinct"):
        validate_config(valid_config)


@pytest.mark.unit
def test_bad_logging(valid_config):
    valid_config["logging"]["level"] = "LOUD"
    valid_config["logging"]["console"] = "yes"
    with pytest.raises(ValidationError) as excinfo:
        validate_config(valid_config)
    message = str(excinfo.value)
    assert "logging.level" in message
    assert "logging.console" in message


@pytest.mark.unit
def test_lowercase_level_is_accepted(valid_config):
    valid_config["logging"]["level"] = "debug"
    validate_config(valid_config)
