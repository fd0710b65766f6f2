"""
Tests for per-strategy validators.
"""

from datetime import datetime, timezone

import pytest

from flagkit.strategies import DateRangeStrategy
from flagkit.validation import (
    CustomAttributeStrategyValidator,
    DateRangeStrategyValidator,
    GeoStrategyValidator,
    IpStrategyValidator,
    PercentageStrategyValidator,
    ProgressiveRolloutStrategyValidator,
    SegmentStrategyValidator,
    SimpleStrategyValidator,
    UserIdStrategyValidator,
    ValidationResult,
)


# ============ Result ============


def test_result_merge_keeps_order():
    """merge keeps errors and warnings in order."""
    first = ValidationResult().add_error("a").add_warning("w1")
    second = ValidationResult().add_error("b").add_warning("w2")

    merged = first.merge(second)
    assert merged.errors == ["a", "b"]
    assert merged.warnings == ["w1", "w2"]
    assert not merged.is_valid()
    assert merged.has_warnings()
    assert merged.to_dict() == {"valid": False, "errors": ["a", "b"], "warnings": ["w1", "w2"]}


def test_empty_result_is_valid():
    """A fresh result is valid."""
    assert ValidationResult().is_valid()
    assert not ValidationResult().has_warnings()


# ============ Simple ============


def test_simple():
    """enabled must be a boolean."""
    validator = SimpleStrategyValidator()
    assert validator.validate({"strategy": "simple"}).is_valid()
    assert validator.validate({"strategy": "simple", "enabled": False}).is_valid()
    assert validator.validate({"enabled": "yes"}).errors == ['The "enabled" field must be a boolean value']


# ============ Percentage ============


@pytest.mark.parametrize(
    "config, errors",
    [
        ({"percentage": 25}, []),
        ({"percentage": "12.5", "hash_algorithm": "md5", "stickiness": ["user_id"], "hash_seed": "x"}, []),
        ({}, ['Percentage strategy requires "percentage" field']),
        ({"percentage": "half"}, ["Percentage must be a number"]),
        ({"percentage": True}, ["Percentage must be a number"]),
        ({"percentage": 101}, ["Percentage must be between 0 and 100"]),
        ({"percentage": -1}, ["Percentage must be between 0 and 100"]),
        ({"percentage": 5, "hash_algorithm": "sha1"}, ['Invalid hash_algorithm "sha1". Valid options: crc32, md5, sha256']),
        ({"percentage": 5, "stickiness": []}, ["Stickiness list cannot be empty"]),
        ({"percentage": 5, "stickiness": 7}, ["Stickiness must be a string or list of strings"]),
        ({"percentage": 5, "hash_seed": 42}, ["Hash seed must be a string"]),
    ],
)
def test_percentage(config, errors):
    """Percentage field errors."""
    assert PercentageStrategyValidator().validate(config).errors == errors


def test_percentage_below_granularity_warns():
    """Percentages below bucket granularity warn."""
    result = PercentageStrategyValidator().validate({"percentage": 0.0005})
    assert result.is_valid()
    assert "statistical significance" in result.warnings[0]


# ============ User ID ============


@pytest.mark.parametrize(
    "config, errors",
    [
        ({"whitelist": ["1", 2]}, []),
        ({"blacklist": ["666"]}, []),
        ({}, ['User ID strategy requires either "whitelist" or "blacklist"']),
        ({"whitelist": []}, ['User ID strategy requires either "whitelist" or "blacklist"']),
        ({"whitelist": ["1"], "blacklist": ["2"]}, ['User ID strategy cannot have both "whitelist" and "blacklist"']),
        ({"whitelist": "1,2"}, ["Whitelist must be a list"]),
        ({"whitelist": ["1", 2.5, True]}, [
            "whitelist[1]: User ID must be string or integer, got float",
            "whitelist[2]: User ID must be string or integer, got bool",
        ]),
    ],
)
def test_user_id(config, errors):
    """Whitelist and blacklist errors."""
    assert UserIdStrategyValidator().validate(config).errors == errors


def test_user_id_large_list_warns():
    """Large lists warn."""
    result = UserIdStrategyValidator(large_list_threshold=3).validate({"whitelist": ["1", "2", "3", "4"]})
    assert result.is_valid()
    assert result.warnings == [
        "Whitelist contains 4 users. Consider using segment strategy for better management."
    ]


# ============ Date range ============


def test_date_range_valid():
    """A valid window with a timezone passes cleanly."""
    result = DateRangeStrategyValidator().validate(
        {"start_date": "2099-01-01", "end_date": "2099-02-01", "timezone": "Europe/Paris"}
    )
    assert result.is_valid()
    assert not result.has_warnings()


@pytest.mark.parametrize(
    "config, error",
    [
        ({"end_date": "2099-01-01"}, 'Date range strategy requires "start_date"'),
        ({"start_date": 20250101}, "start_date must be a string"),
        ({"start_date": "first of june"}, 'Invalid start_date format: "first of june"'),
        ({"start_date": "2099-02-01", "end_date": "2099-01-01"}, "end_date must be after start_date"),
        ({"start_date": "2099-01-01", "end_date": "later"}, 'Invalid end_date format: "later"'),
        ({"start_date": "2099-01-01", "timezone": "Nowhere/City"}, 'Invalid timezone: "Nowhere/City"'),
        ({"start_date": "2099-01-01", "timezone": 5}, "timezone must be a string"),
    ],
)
def test_date_range_errors(config, error):
    """Date range field errors."""
    assert error in DateRangeStrategyValidator().validate(config).errors


def test_date_range_past_end_warns():
    """An end_date before today warns."""
    result = DateRangeStrategyValidator().validate({"start_date": "2020-01-01", "end_date": "2020-01-31"})
    assert result.is_valid()
    assert result.warnings == ["end_date is in the past - feature will always be disabled"]


def test_date_range_single_day_window():
    """start_date == end_date covers that whole day."""
    result = DateRangeStrategyValidator().validate({"start_date": "2099-02-01", "end_date": "2099-02-01"})
    assert result.is_valid()

    result = DateRangeStrategyValidator().validate(
        {"start_date": "2099-02-01T18:00:00", "end_date": "2099-02-01T09:00:00"}
    )
    assert result.is_valid()


def test_date_range_end_today_does_not_warn():
    """The end day stays enabled until 23:59:59, so today is not in the past."""
    today = datetime.now(timezone.utc).date().isoformat()
    config = {"start_date": "2020-01-01", "end_date": today}

    result = DateRangeStrategyValidator().validate(config)
    assert result.is_valid()
    assert not result.has_warnings()
    assert DateRangeStrategy().is_enabled(config, {})


# ============ Geo ============


def test_geo():
    """Geo field errors."""
    validator = GeoStrategyValidator()
    assert validator.validate({"countries": ["US", "CA"], "cities": ["Paris"]}).is_valid()
    assert validator.validate({}).errors == [
        'Geo strategy requires at least one of: "countries", "regions", "cities"'
    ]
    assert validator.validate({"regions": "CA"}).errors == ["regions must be a list"]
    assert validator.validate({"cities": ["Paris", 75]}).errors == ["cities[1]: City must be string"]


def test_geo_non_iso_country_warns():
    """Non ISO country codes warn."""
    result = GeoStrategyValidator().validate({"countries": ["US", "USA"]})
    assert result.is_valid()
    assert result.warnings == ['countries[1]: "USA" should be ISO 3166-1 alpha-2 code (2 letters)']


# ============ IP ============


def test_ip_valid():
    """Valid IPs and ranges pass."""
    config = {
        "whitelist_ips": ["203.0.113.7", "2001:db8::1"],
        "ip_ranges": ["10.0.0.0/8", "2001:db8::/32", "192.168.1.1"],
    }
    assert IpStrategyValidator().validate(config).is_valid()


@pytest.mark.parametrize(
    "config, error",
    [
        ({}, 'IP strategy requires either "whitelist_ips" or "ip_ranges"'),
        ({"whitelist_ips": ["300.1.1.1"]}, 'whitelist_ips[0]: Invalid IP address "300.1.1.1"'),
        ({"whitelist_ips": [1234]}, "whitelist_ips[0]: IP must be string"),
        ({"ip_ranges": "10.0.0.0/8"}, "ip_ranges must be a list"),
        ({"ip_ranges": ["10.0.0/8"]}, 'ip_ranges[0]: Invalid IP address in CIDR "10.0.0"'),
        ({"ip_ranges": ["10.0.0.0/x"]}, 'ip_ranges[0]: CIDR bits must be numeric in "10.0.0.0/x"'),
        ({"ip_ranges": ["10.0.0.0/33"]}, 'ip_ranges[0]: CIDR bits must be between 0 and 32 for IPv4 in "10.0.0.0/33"'),
        ({"ip_ranges": ["::/129"]}, 'ip_ranges[0]: CIDR bits must be between 0 and 128 for IPv6 in "::/129"'),
        ({"ip_ranges": ["localhost"]}, 'ip_ranges[0]: Invalid IP address "localhost"'),
    ],
)
def test_ip_errors(config, error):
    """IP and CIDR errors."""
    assert IpStrategyValidator().validate(config).errors == [error]


# ============ Custom attribute ============


def test_custom_attribute_valid():
    """Valid rules pass."""
    config = {
        "rules": [
            {"attribute": "tier", "operator": "in", "values": ["premium"]},
            {"attribute": "phone", "operator": "regex", "value": r"/^\+1/"},
        ]
    }
    assert CustomAttributeStrategyValidator().validate(config).is_valid()


@pytest.mark.parametrize(
    "rules, error",
    [
        (None, 'Custom attribute strategy requires "rules" list'),
        ([], 'Custom attribute strategy requires "rules" list'),
        ("tier=premium", "rules must be a list"),
        (["tier=premium"], "rules[0]: Rule must be a dict"),
        ([{"operator": "equals", "value": 1}], 'rules[0]: Missing required field "attribute"'),
        ([{"attribute": 5, "operator": "equals", "value": 1}], "rules[0]: attribute must be string"),
        ([{"attribute": "a", "value": 1}], 'rules[0]: Missing required field "operator"'),
        ([{"attribute": "a", "operator": "equals"}], 'rules[0]: Missing required field "value" or "values"'),
        ([{"attribute": "a", "operator": "in", "values": "x"}], 'rules[0]: "values" must be a list'),
        ([{"attribute": "a", "operator": "regex", "value": 5}], "rules[0]: regex pattern must be string"),
        ([{"attribute": "a", "operator": "regex", "value": "/(/"}], 'rules[0]: Invalid regex pattern "/(/"'),
    ],
)
def test_custom_attribute_errors(rules, error):
    """Rule field errors."""
    config = {} if rules is None else {"rules": rules}
    assert CustomAttributeStrategyValidator().validate(config).errors == [error]


def test_custom_attribute_unknown_operator():
    """Unknown operators list the valid ones."""
    config = {"rules": [{"attribute": "a", "operator": "like", "value": "x"}]}
    errors = CustomAttributeStrategyValidator().validate(config).errors
    assert len(errors) == 1
    assert errors[0].startswith('rules[0]: Invalid operator "like". Valid options: equals, not_equals')


# ============ Segment ============


def test_segment(segments):
    """Segments must exist in the provider."""
    validator = SegmentStrategyValidator(segments)
    assert validator.validate({"segments": ["beta_testers", "staff"]}).is_valid()
    assert validator.validate({"segments": []}).errors == ['Segment strategy requires "segments" list']
    assert validator.validate({"segments": "staff"}).errors == ["segments must be a list"]
    assert validator.validate({"segments": [7]}).errors == ["segments[0]: Segment name must be string, got int"]
    assert validator.validate({"segments": ["ghosts"]}).errors == [
        'Segment "ghosts" not found. Available segments: beta_testers, staff'
    ]


def test_segment_without_any_segments(segment_provider):
    """An empty provider reports "none" available."""
    segment_provider.segments.clear()
    errors = SegmentStrategyValidator(segment_provider).validate({"segments": ["vip"]}).errors
    assert errors == ['Segment "vip" not found. Available segments: none']


# ============ Progressive rollout ============


def test_progressive_rollout_valid():
    """A valid schedule passes."""
    config = {
        "schedule": [
            {"percentage": 10, "start_date": "2025-01-01"},
            {"percentage": 100, "start_date": "2025-01-08"},
        ],
        "timezone": "UTC",
        "stickiness": "user_id",
    }
    assert ProgressiveRolloutStrategyValidator().validate(config).is_valid()


@pytest.mark.parametrize(
    "config, error",
    [
        ({}, 'Progressive rollout strategy requires "schedule" list'),
        ({"schedule": {"percentage": 5}}, "schedule must be a list"),
        ({"schedule": ["stage"]}, "schedule[0]: Stage must be a dict"),
        ({"schedule": [{"start_date": "2025-01-01"}]}, 'schedule[0]: Missing required field "percentage"'),
        ({"schedule": [{"percentage": "x", "start_date": "2025-01-01"}]}, "schedule[0]: percentage must be a number"),
        ({"schedule": [{"percentage": 120, "start_date": "2025-01-01"}]}, "schedule[0]: percentage must be between 0 and 100"),
        ({"schedule": [{"percentage": 5}]}, 'schedule[0]: Missing required field "start_date"'),
        ({"schedule": [{"percentage": 5, "start_date": "soon"}]}, 'schedule[0]: Invalid start_date format: "soon"'),
        (
            {"schedule": [{"percentage": 50, "start_date": "2025-01-01"}, {"percentage": 50, "start_date": "2025-01-02"}]},
            "schedule[1]: percentage must increase (got 50, previous was 50)",
        ),
        (
            {"schedule": [{"percentage": 10, "start_date": "2025-01-02"}, {"percentage": 50, "start_date": "2025-01-01"}]},
            "schedule[1]: start_date must be after previous stage",
        ),
        ({"schedule": [{"percentage": 5, "start_date": "2025-01-01"}], "timezone": "Nowhere/City"}, 'Invalid timezone: "Nowhere/City"'),
        ({"schedule": [{"percentage": 5, "start_date": "2025-01-01"}], "stickiness": []}, "Stickiness list cannot be empty"),
    ],
)
def test_progressive_rollout_errors(config, error):
    """Schedule errors."""
    assert ProgressiveRolloutStrategyValidator().validate(config).errors == [error]
