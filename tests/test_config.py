import pytest

from cloudops.config import (
    AttributeMapping,
    ClientConfig,
    Config,
    ConfigError,
    LogConfig,
    MetricConfig,
    ResourceFilter,
    TraceConfig,
    default_config,
    set_version_in_user_agent,
    validate_config,
)


@pytest.mark.parametrize("cfg", [Config(), default_config()], ids=["empty", "default"])
def test_valid_configs(cfg):
    assert validate_config(cfg) is cfg


@pytest.mark.parametrize(
    "cfg, message",
    [
        (
            Config(
                trace_config=TraceConfig(
                    attribute_mappings=[
                        AttributeMapping(key="foo", replacement="bar"),
                        AttributeMapping(key="foo", replacement="baz"),
                    ]
                )
            ),
            "duplicate key",
        ),
        (
            Config(
                trace_config=TraceConfig(
                    attribute_mappings=[
                        AttributeMapping(key="key1", replacement="same"),
                        AttributeMapping(key="key2", replacement="same"),
                    ]
                )
            ),
            "duplicate replacement",
        ),
        (
            Config(metric_config=MetricConfig(resource_filters=[ResourceFilter(regex="*")])),
            "unable to parse resource filter regex",
        ),
    ],
    ids=["duplicate keys", "duplicate replacements", "invalid regex"],
)
def test_invalid_configs(cfg, message):
    with pytest.raises(ConfigError, match=message):
        validate_config(cfg)


def test_empty_regex_is_skipped():
    cfg = Config(metric_config=MetricConfig(resource_filters=[ResourceFilter(prefix="k8s.")]))
    assert validate_config(cfg) is cfg


def test_gzip_compression_allowed_for_logs_and_metrics():
    cfg = Config(
        log_config=LogConfig(client_config=ClientConfig(compression="gzip")),
        metric_config=MetricConfig(client_config=ClientConfig(compression="gzip")),
    )
    assert validate_config(cfg) is cfg


def test_unknown_log_compression():
    cfg = Config(log_config=LogConfig(client_config=ClientConfig(compression="zstd")))
    with pytest.raises(ConfigError, match="unknown compression option 'zstd'"):
        validate_config(cfg)


def test_unknown_metric_compression():
    cfg = Config(metric_config=MetricConfig(client_config=ClientConfig(compression="br")))
    with pytest.raises(ConfigError, match="unknown compression option 'br'"):
        validate_config(cfg)


def test_trace_compression_rejected():
    cfg = Config(trace_config=TraceConfig(client_config=ClientConfig(compression="gzip")))
    with pytest.raises(ConfigError, match="traces.compression invalid"):
        validate_config(cfg)


def test_default_config_values():
    cfg = default_config()
    assert cfg.user_agent == "opentelemetry-collector-contrib {{version}}"
    assert cfg.log_config.service_resource_labels is True
    assert cfg.metric_config.prefix == "workload.googleapis.com"
    assert cfg.metric_config.known_domains == [
        "googleapis.com",
        "kubernetes.io",
        "istio.io",
        "knative.dev",
    ]
    assert cfg.metric_config.create_metric_descriptor_buffer_size == 10
    assert cfg.metric_config.instrumentation_library_labels is True
    assert cfg.metric_config.service_resource_labels is True
    assert cfg.metric_config.cumulative_normalization is True
    assert cfg.metric_config.enable_sum_of_squared_deviation is False


def test_default_configs_do_not_share_domains():
    first = default_config()
    first.metric_config.known_domains.append("example.com")
    assert "example.com" not in default_config().metric_config.known_domains


def test_set_version_in_user_agent():
    cfg = default_config()
    set_version_in_user_agent(cfg, "1.2.3")
    assert cfg.user_agent == "opentelemetry-collector-contrib 1.2.3"


def test_set_version_without_placeholder():
    cfg = Config(user_agent="custom-agent")
    set_version_in_user_agent(cfg, "1.2.3")
    assert cfg.user_agent == "custom-agent"