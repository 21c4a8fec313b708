"""
Unit tests for configuration loading.
"""

import pytest
import yaml

from hivemall_spark.exceptions import ConfigError
from hivemall_spark.utils.config_parser import (
    ConfigParser,
    HivemallConfig,
    LogLevel,
    SparkConfig,
    load_config,
)


class TestHivemallConfig:

    def test_defaults(self):
        config = HivemallConfig()
        assert config.jar_path is None
        assert config.mix_servers is None
        assert config.auto_register is True
        assert config.log_level == LogLevel.INFO
        assert config.spark == SparkConfig()
        assert config.spark.app_name == "hivemall-spark"
        assert config.spark.enable_hive_support is True

    def test_blank_values_become_none(self):
        config = HivemallConfig(jar_path="  ", mix_servers="")
        assert config.jar_path is None
        assert config.mix_servers is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("HIVEMALL_JAR", "/opt/hivemall.jar")
        monkeypatch.setenv("HIVEMALL_MIX_SERVERS", "m1:11212,m2:11212")

        config = HivemallConfig.from_env()

        assert config.jar_path == "/opt/hivemall.jar"
        assert config.mix_servers == "m1:11212,m2:11212"

    def test_from_env_overrides(self, monkeypatch):
        monkeypatch.setenv("HIVEMALL_JAR", "/opt/hivemall.jar")
        config = HivemallConfig.from_env(jar_path="/other.jar", auto_register=False)
        assert config.jar_path == "/other.jar"
        assert config.auto_register is False

    def test_from_env_without_variables(self):
        config = HivemallConfig.from_env()
        assert config.jar_path is None
        assert config.mix_servers is None


class TestConfigParser:

    @pytest.fixture
    def write_config(self, tmp_path):
        def write(content):
            path = tmp_path / "hivemall.yaml"
            path.write_text(content)
            return path
        return write

    def test_load_config(self, write_config):
        path = write_config(
            "jar_path: /opt/hivemall/hivemall-with-dependencies.jar\n"
            "log_level: DEBUG\n"
            "spark:\n"
            "  app_name: news20\n"
            "  master: local[2]\n"
            "  config:\n"
            "    spark.sql.shuffle.partitions: '4'\n"
        )

        config = ConfigParser().load_config(path)

        assert config.jar_path == "/opt/hivemall/hivemall-with-dependencies.jar"
        assert config.log_level == LogLevel.DEBUG
        assert config.spark.app_name == "news20"
        assert config.spark.master == "local[2]"
        assert config.spark.config == {"spark.sql.shuffle.partitions": "4"}

    def test_environment_substitution(self, write_config, monkeypatch):
        monkeypatch.setenv("MIX_HOSTS", "mix1:11212")
        path = write_config(
            "mix_servers: ${MIX_HOSTS}\n"
            "jar_path: ${JAR_DIR:/opt/hivemall}/hivemall.jar\n"
        )

        config = ConfigParser().load_config(path)

        assert config.mix_servers == "mix1:11212"
        assert config.jar_path == "/opt/hivemall/hivemall.jar"

    def test_single_placeholder_gets_native_type(self, write_config, monkeypatch):
        monkeypatch.setenv("AUTO_REGISTER", "false")
        path = write_config("auto_register: ${AUTO_REGISTER}\n")

        assert ConfigParser().load_config(path).auto_register is False

    def test_missing_variable(self, write_config):
        path = write_config("mix_servers: ${UNSET_HIVEMALL_VARIABLE}\n")
        with pytest.raises(ConfigError, match="UNSET_HIVEMALL_VARIABLE"):
            ConfigParser().load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Config file not found"):
            ConfigParser().load_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, write_config):
        path = write_config("spark: [unclosed\n")
        with pytest.raises(ConfigError, match="Error parsing YAML config"):
            ConfigParser().load_config(path)

    def test_root_must_be_mapping(self, write_config):
        path = write_config("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            ConfigParser().load_config(path)

    def test_invalid_values(self, write_config):
        path = write_config("log_level: LOUD\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            ConfigParser().load_config(path)

    def test_empty_file_gives_defaults(self, write_config):
        assert ConfigParser().load_config(write_config("")) == HivemallConfig()

    def test_convert_value(self):
        parser = ConfigParser()
        assert parser._convert_value("true") is True
        assert parser._convert_value("42") == 42
        assert parser._convert_value("0.5") == 0.5
        assert parser._convert_value("mix1:11212") == "mix1:11212"

    def test_get_config_before_load(self):
        with pytest.raises(ConfigError, match="No configuration loaded"):
            ConfigParser().get_config()

    def test_save_config(self, write_config, tmp_path):
        parser = ConfigParser()
        parser.load_config(write_config("jar_path: /opt/hivemall.jar\nlog_level: ERROR\n"))
        output = tmp_path / "out" / "saved.yaml"

        parser.save_config(output)

        saved = yaml.safe_load(output.read_text())
        assert saved["jar_path"] == "/opt/hivemall.jar"
        assert saved["log_level"] == "ERROR"
        assert "mix_servers" not in saved
        assert ConfigParser().load_config(output) == parser.get_config()


class TestLoadConfig:

    def test_without_path_reads_environment(self, monkeypatch):
        monkeypatch.setenv("HIVEMALL_JAR", "/env/hivemall.jar")
        assert load_config().jar_path == "/env/hivemall.jar"

    def test_with_path(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text("auto_register: false\n")
        assert load_config(path).auto_register is False


class TestScalarValues:

    def test_placeholder_defaults_in_spark_config(self, tmp_path):
        path = tmp_path / "c.yaml"
        path.write_text(
            "spark:\n"
            "  config:\n"
            "    spark.executor.instances: ${N_EXEC:4}\n"
            "    spark.sql.adaptive.enabled: ${ADAPTIVE:true}\n"
            "    spark.memory.fraction: 0.6\n"
        )

        config = ConfigParser().load_config(path)

        assert config.spark.config == {
            "spark.executor.instances": "4",
            "spark.sql.adaptive.enabled": "true",
            "spark.memory.fraction": "0.6",
        }

    def test_numeric_placeholder_for_string_fields(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MIX_PORT_ONLY", "11212")
        path = tmp_path / "c.yaml"
        path.write_text("mix_servers: ${MIX_PORT_ONLY}\nspark:\n  master: ${MASTER:42}\n")

        config = ConfigParser().load_config(path)

        assert config.mix_servers == "11212"
        assert config.spark.master == "42"
