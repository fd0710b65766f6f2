"""
Built-in strategy validators.

One validator per strategy, registered with ValidationService by
strategy_name. Field names match the configuration keys the strategies
read, so a configuration that validates cleanly evaluates as configured.
"""

import ipaddress
from datetime import date, datetime
from typing import Any

from ..segments.interfaces import SegmentProvider
from ..strategies.dates import (
    end_of_day,
    is_valid_timezone,
    now_in,
    parse_datetime,
    resolve_timezone,
    start_of_day,
)
from ..strategies.interfaces import BUCKET_COUNT, FlagStrategy, HashAlgorithm
from ..strategies.operators import AttributeOperator, compile_pattern, to_number
from ..strategies.percentage import MAX_PERCENTAGE, MIN_PERCENTAGE
from .interfaces import StrategyValidator
from .result import ValidationResult

DEFAULT_LARGE_LIST_THRESHOLD = 10_000

# Smallest percentage a single bucket can represent.
MIN_PERCENTAGE_GRANULARITY = 100 / BUCKET_COUNT


# ============================================================
# SHARED CHECKS
# ============================================================

def _filled(config: dict[str, Any], key: str) -> bool:
    """Key is set to a non-empty value."""
    value = config.get(key)
    return value is not None and value != "" and value != [] and value != {}


def _is_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def _is_date_value(value: Any) -> bool:
    return isinstance(value, (str, date, datetime))


def check_timezone(config: dict[str, Any], result: ValidationResult) -> None:
    """Validate the optional "timezone" field."""
    tz_name = config.get("timezone")
    if tz_name is None:
        return
    if not isinstance(tz_name, str):
        result.add_error("timezone must be a string")
    elif not is_valid_timezone(tz_name):
        result.add_error(f'Invalid timezone: "{tz_name}"')


def check_stickiness(config: dict[str, Any], result: ValidationResult) -> None:
    """Validate the optional "stickiness" field."""
    stickiness = config.get("stickiness")
    if stickiness is None or isinstance(stickiness, str):
        return
    if not isinstance(stickiness, list):
        result.add_error("Stickiness must be a string or list of strings")
    elif not stickiness:
        result.add_error("Stickiness list cannot be empty")
    elif not all(isinstance(attribute, str) for attribute in stickiness):
        result.add_error("Stickiness must be a string or list of strings")


# ============================================================
# VALIDATORS
# ============================================================

class SimpleStrategyValidator(StrategyValidator):
    """The only option is "enabled", which must be a boolean when present."""

    strategy_name = FlagStrategy.SIMPLE.value

    def validate(self, config: dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        if config.get("enabled") is not None and not isinstance(config["enabled"], bool):
            result.add_error('The "enabled" field must be a boolean value')
        return result


class PercentageStrategyValidator(StrategyValidator):
    """
    Validates percentage rollouts.

    Checks:
    - percentage: required, numeric, 0-100
    - hash_algorithm: crc32 / md5 / sha256
    - stickiness: attribute name or non-empty list of names
    - hash_seed: string
    """

    strategy_name = FlagStrategy.PERCENTAGE.value

    def validate(self, config: dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        if config.get("percentage") is None:
            result.add_error('Percentage strategy requires "percentage" field')
        else:
            percentage = to_number(config["percentage"])
            if percentage is None:
                result.add_error("Percentage must be a number")
            else:
                if percentage < MIN_PERCENTAGE or percentage > MAX_PERCENTAGE:
                    result.add_error(
                        f"Percentage must be between {MIN_PERCENTAGE} and {MAX_PERCENTAGE}"
                    )
                if 0 < percentage < MIN_PERCENTAGE_GRANULARITY:
                    result.add_warning(
                        f"Percentage below {MIN_PERCENTAGE_GRANULARITY}% may not have "
                        f"statistical significance with {BUCKET_COUNT:,} buckets"
                    )

        algorithm = config.get("hash_algorithm")
        if algorithm is not None and algorithm not in HashAlgorithm.values():
            result.add_error(
                f'Invalid hash_algorithm "{algorithm}". '
                f"Valid options: {', '.join(HashAlgorithm.values())}"
            )

        check_stickiness(config, result)

        if config.get("hash_seed") is not None and not isinstance(config["hash_seed"], str):
            result.add_error("Hash seed must be a string")

        return result


class UserIdStrategyValidator(StrategyValidator):
    """
    Validates whitelist / blacklist targeting.

    Exactly one non-empty list is allowed. Very long lists get a warning
    suggesting a segment instead.
    """

    strategy_name = FlagStrategy.USER_ID.value

    def __init__(self, large_list_threshold: int = DEFAULT_LARGE_LIST_THRESHOLD):
        self.large_list_threshold = large_list_threshold

    def validate(self, config: dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        has_whitelist = _filled(config, "whitelist")
        has_blacklist = _filled(config, "blacklist")

        if not has_whitelist and not has_blacklist:
            result.add_error('User ID strategy requires either "whitelist" or "blacklist"')

        if has_whitelist and has_blacklist:
            result.add_error('User ID strategy cannot have both "whitelist" and "blacklist"')

        for list_name, present in (("whitelist", has_whitelist), ("blacklist", has_blacklist)):
            if present:
                self._validate_user_list(config[list_name], list_name, result)

        return result

    def _validate_user_list(self, users: Any, list_name: str, result: ValidationResult) -> None:
        if not isinstance(users, list):
            result.add_error(f"{list_name.capitalize()} must be a list")
            return

        for index, user_id in enumerate(users):
            if isinstance(user_id, bool) or not isinstance(user_id, (str, int)):
                result.add_error(
                    f"{list_name}[{index}]: User ID must be string or integer, "
                    f"got {type(user_id).__name__}"
                )

        if len(users) > self.large_list_threshold:
            result.add_warning(
                f"{list_name.capitalize()} contains {len(users)} users. "
                "Consider using segment strategy for better management."
            )


class DateRangeStrategyValidator(StrategyValidator):
    """
    Validates time windows.

    start_date is required, end_date optional but not on an earlier day.
    Both bounds cover whole days, so start_date == end_date is a one-day
    window. An end_date before today only warns: the flag is valid, just
    always off.
    """

    strategy_name = FlagStrategy.DATE_RANGE.value

    def validate(self, config: dict[str, Any]) -> ValidationResult:
        result = ValidationResult()
        tz = resolve_timezone(config.get("timezone"))

        start = None
        if not _filled(config, "start_date"):
            result.add_error('Date range strategy requires "start_date"')
        elif not _is_date_value(config["start_date"]):
            result.add_error("start_date must be a string")
        else:
            start = parse_datetime(config["start_date"], tz)
            if start is None:
                result.add_error(f'Invalid start_date format: "{config["start_date"]}"')

        if _filled(config, "end_date"):
            if not _is_date_value(config["end_date"]):
                result.add_error("end_date must be a string")
            else:
                end = parse_datetime(config["end_date"], tz)
                if end is None:
                    result.add_error(f'Invalid end_date format: "{config["end_date"]}"')
                else:
                    if start is not None and start_of_day(start) > end_of_day(end):
                        result.add_error("end_date must be after start_date")
                    if end_of_day(end) < now_in(tz):
                        result.add_warning("end_date is in the past - feature will always be disabled")

        check_timezone(config, result)
        return result


_GEO_LABELS = {"countries": "Country code", "regions": "Region", "cities": "City"}


class GeoStrategyValidator(StrategyValidator):
    """
    Validates geographic targeting.

    Country codes that aren't ISO 3166-1 alpha-2 only warn, since the
    strategy compares whatever the context provides.
    """

    strategy_name = FlagStrategy.GEO.value

    def validate(self, config: dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        categories = [key for key in ("countries", "regions", "cities") if _filled(config, key)]
        if not categories:
            result.add_error('Geo strategy requires at least one of: "countries", "regions", "cities"')
            return result

        for key in categories:
            values = config[key]
            if not isinstance(values, list):
                result.add_error(f"{key} must be a list")
                continue

            for index, value in enumerate(values):
                if not isinstance(value, str):
                    result.add_error(f"{key}[{index}]: {_GEO_LABELS[key]} must be string")
                elif key == "countries" and not (len(value) == 2 and value.isascii() and value.isalpha()):
                    result.add_warning(
                        f'countries[{index}]: "{value}" should be ISO 3166-1 alpha-2 code (2 letters)'
                    )

        return result


class IpStrategyValidator(StrategyValidator):
    """Validates exact IPs and CIDR ranges (IPv4 and IPv6)."""

    strategy_name = FlagStrategy.IP.value

    def validate(self, config: dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        has_whitelist = _filled(config, "whitelist_ips")
        has_ranges = _filled(config, "ip_ranges")

        if not has_whitelist and not has_ranges:
            result.add_error('IP strategy requires either "whitelist_ips" or "ip_ranges"')
            return result

        if has_whitelist:
            if not isinstance(config["whitelist_ips"], list):
                result.add_error("whitelist_ips must be a list")
            else:
                for index, ip in enumerate(config["whitelist_ips"]):
                    if not isinstance(ip, str):
                        result.add_error(f"whitelist_ips[{index}]: IP must be string")
                    elif not _is_ip(ip):
                        result.add_error(f'whitelist_ips[{index}]: Invalid IP address "{ip}"')

        if has_ranges:
            if not isinstance(config["ip_ranges"], list):
                result.add_error("ip_ranges must be a list")
            else:
                for index, ip_range in enumerate(config["ip_ranges"]):
                    if not isinstance(ip_range, str):
                        result.add_error(f"ip_ranges[{index}]: Range must be string")
                    else:
                        self._validate_cidr(ip_range, index, result)

        return result

    def _validate_cidr(self, ip_range: str, index: int, result: ValidationResult) -> None:
        # A bare IP is an exact /32 or /128 range
        if "/" not in ip_range:
            if not _is_ip(ip_range):
                result.add_error(f'ip_ranges[{index}]: Invalid IP address "{ip_range}"')
            return

        subnet, bits = ip_range.split("/", 1)
        try:
            address = ipaddress.ip_address(subnet)
        except ValueError:
            result.add_error(f'ip_ranges[{index}]: Invalid IP address in CIDR "{subnet}"')
            return

        if not (bits.isascii() and bits.isdigit()):
            result.add_error(f'ip_ranges[{index}]: CIDR bits must be numeric in "{ip_range}"')
            return

        max_bits = address.max_prefixlen
        if int(bits) > max_bits:
            result.add_error(
                f"ip_ranges[{index}]: CIDR bits must be between 0 and {max_bits} "
                f'for IPv{address.version} in "{ip_range}"'
            )


class CustomAttributeStrategyValidator(StrategyValidator):
    """
    Validates attribute rules.

    Each rule needs an attribute, a known operator and a value (or values).
    Regex patterns must compile.
    """

    strategy_name = FlagStrategy.CUSTOM_ATTRIBUTE.value

    def validate(self, config: dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        rules = config.get("rules")
        if not rules:
            result.add_error('Custom attribute strategy requires "rules" list')
            return result

        if not isinstance(rules, list):
            result.add_error("rules must be a list")
            return result

        for index, rule in enumerate(rules):
            if not isinstance(rule, dict):
                result.add_error(f"rules[{index}]: Rule must be a dict")
                continue
            self._validate_rule(rule, index, result)

        return result

    def _validate_rule(self, rule: dict[str, Any], index: int, result: ValidationResult) -> None:
        if not rule.get("attribute"):
            result.add_error(f'rules[{index}]: Missing required field "attribute"')
        elif not isinstance(rule["attribute"], str):
            result.add_error(f"rules[{index}]: attribute must be string")

        operator = rule.get("operator")
        if not operator:
            result.add_error(f'rules[{index}]: Missing required field "operator"')
        elif operator not in AttributeOperator.values():
            result.add_error(
                f'rules[{index}]: Invalid operator "{operator}". '
                f"Valid options: {', '.join(AttributeOperator.values())}"
            )

        has_value = rule.get("value") is not None
        has_values = rule.get("values") is not None

        if not has_value and not has_values:
            result.add_error(f'rules[{index}]: Missing required field "value" or "values"')

        if has_values and not isinstance(rule["values"], list):
            result.add_error(f'rules[{index}]: "values" must be a list')

        if operator == AttributeOperator.REGEX.value and has_value:
            pattern = rule["value"]
            if not isinstance(pattern, str):
                result.add_error(f"rules[{index}]: regex pattern must be string")
            elif compile_pattern(pattern) is None:
                result.add_error(f'rules[{index}]: Invalid regex pattern "{pattern}"')


class SegmentStrategyValidator(StrategyValidator):
    """Every referenced segment must exist in the segment provider."""

    strategy_name = FlagStrategy.SEGMENT.value

    def __init__(self, segments: SegmentProvider):
        self.segments = segments

    def validate(self, config: dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        segment_names = config.get("segments")
        if not segment_names:
            result.add_error('Segment strategy requires "segments" list')
            return result

        if not isinstance(segment_names, list):
            result.add_error("segments must be a list")
            return result

        for index, segment_name in enumerate(segment_names):
            if not isinstance(segment_name, str):
                result.add_error(
                    f"segments[{index}]: Segment name must be string, "
                    f"got {type(segment_name).__name__}"
                )
                continue

            if not self.segments.has(segment_name):
                available = ", ".join(self.segments.get_names()) or "none"
                result.add_error(
                    f'Segment "{segment_name}" not found. Available segments: {available}'
                )

        return result


class ProgressiveRolloutStrategyValidator(StrategyValidator):
    """
    Validates rollout schedules.

    Stages must be in chronological order with strictly increasing
    percentages, so the active percentage only ever goes up.
    """

    strategy_name = FlagStrategy.PROGRESSIVE_ROLLOUT.value

    def validate(self, config: dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        schedule = config.get("schedule")
        if not schedule:
            result.add_error('Progressive rollout strategy requires "schedule" list')
            return result

        if not isinstance(schedule, list):
            result.add_error("schedule must be a list")
            return result

        check_timezone(config, result)
        tz = resolve_timezone(config.get("timezone"))

        previous_percentage = None
        previous_date = None

        for index, stage in enumerate(schedule):
            if not isinstance(stage, dict):
                result.add_error(f"schedule[{index}]: Stage must be a dict")
                continue

            if stage.get("percentage") is None:
                result.add_error(f'schedule[{index}]: Missing required field "percentage"')
            else:
                percentage = to_number(stage["percentage"])
                if percentage is None:
                    result.add_error(f"schedule[{index}]: percentage must be a number")
                else:
                    if percentage < MIN_PERCENTAGE or percentage > MAX_PERCENTAGE:
                        result.add_error(
                            f"schedule[{index}]: percentage must be between "
                            f"{MIN_PERCENTAGE} and {MAX_PERCENTAGE}"
                        )
                    if previous_percentage is not None and percentage <= previous_percentage:
                        result.add_error(
                            f"schedule[{index}]: percentage must increase "
                            f"(got {percentage}, previous was {previous_percentage})"
                        )
                    previous_percentage = percentage

            if stage.get("start_date") is None:
                result.add_error(f'schedule[{index}]: Missing required field "start_date"')
            elif not _is_date_value(stage["start_date"]):
                result.add_error(f"schedule[{index}]: start_date must be a string")
            else:
                start = parse_datetime(stage["start_date"], tz)
                if start is None:
                    result.add_error(
                        f'schedule[{index}]: Invalid start_date format: "{stage["start_date"]}"'
                    )
                else:
                    if previous_date is not None and start <= previous_date:
                        result.add_error(f"schedule[{index}]: start_date must be after previous stage")
                    previous_date = start

        check_stickiness(config, result)
        return result
