"""Configuration loading for ledgerkit.

Configuration is loaded once per process (defaults, optional YAML file,
environment overrides) and passed by reference into the services; the
engine never reads module-level mutable tables.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

import yaml

from ledgerkit.domain.classification import ClassificationRules
from ledgerkit.domain.entities import AccountType, CREDIT_NORMAL, DEBIT_NORMAL
from ledgerkit.domain.errors import ConfigurationError

CONFIG_PATH_ENV = "LEDGERKIT_CONFIG"


@dataclass(frozen=True)
class ParsingSettings:
    """Statement parsing options."""

    default_year: Optional[int] = None
    day_first: bool = True


@dataclass(frozen=True)
class SignConvention:
    """Account type resolution and normal-balance table.

    ``prefixes`` maps the leading digit of an account code to its type; an
    explicit type tag on the account always wins.
    """

    prefixes: Mapping[str, AccountType] = field(
        default_factory=lambda: {
            "1": AccountType.ASSET,
            "2": AccountType.LIABILITY,
            "3": AccountType.EQUITY,
            "4": AccountType.REVENUE,
            "5": AccountType.REVENUE,
            "6": AccountType.REVENUE,
            "7": AccountType.EXPENSE,
            "8": AccountType.EXPENSE,
            "9": AccountType.EXPENSE,
        }
    )
    normal_balances: Mapping[AccountType, str] = field(
        default_factory=lambda: {
            AccountType.ASSET: DEBIT_NORMAL,
            AccountType.EXPENSE: DEBIT_NORMAL,
            AccountType.LIABILITY: CREDIT_NORMAL,
            AccountType.EQUITY: CREDIT_NORMAL,
            AccountType.REVENUE: CREDIT_NORMAL,
        }
    )

    def account_type_for(self, code: str, explicit: Optional[AccountType] = None) -> AccountType:
        """Resolve an account's type from its tag or code prefix.

        Raises:
            ConfigurationError: If the code prefix is not mapped
        """
        if explicit is not None:
            return explicit
        prefix = (code or "").strip()[:1]
        try:
            return self.prefixes[prefix]
        except KeyError:
            raise ConfigurationError(f"No account type configured for account code '{code}'")

    def normal_balance_for(self, code: str, explicit: Optional[AccountType] = None) -> str:
        """Return "D" or "C" for an account."""
        return self.normal_balances[self.account_type_for(code, explicit)]


@dataclass(frozen=True)
class LedgerConfig:
    """Top-level application configuration."""

    source_path: Optional[Path] = None
    parsing: ParsingSettings = field(default_factory=ParsingSettings)
    classification: ClassificationRules = field(default_factory=ClassificationRules)
    sign_convention: SignConvention = field(default_factory=SignConvention)


ENV_OVERRIDES: dict[str, tuple[str, type]] = {
    "parsing.default_year": ("LEDGERKIT_DEFAULT_YEAR", int),
    "parsing.day_first": ("LEDGERKIT_DAY_FIRST", bool),
}


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> LedgerConfig:
    """Load configuration from defaults, YAML file, and env overrides.

    Args:
        config_path: Explicit YAML file; falls back to LEDGERKIT_CONFIG
        env: Environment mapping (defaults to os.environ)

    Returns:
        Frozen LedgerConfig

    Raises:
        ConfigurationError: If the file or an override is invalid
    """
    env = dict(os.environ if env is None else env)
    resolved = _resolve_config_path(config_path, env)
    file_data = _load_yaml(resolved) if resolved is not None else {}
    merged = _apply_env_overrides(file_data, env)
    return _build_config(merged, resolved)


def _resolve_config_path(config_path: str | Path | None, env: Mapping[str, str]) -> Optional[Path]:
    if config_path:
        path = Path(config_path).expanduser()
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        return path
    if env.get(CONFIG_PATH_ENV):
        return Path(env[CONFIG_PATH_ENV]).expanduser()
    return None


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Config file at {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, MutableMapping):
        raise ConfigurationError(f"Config file at {path} must define a mapping root object.")
    return dict(data)


def _apply_env_overrides(config: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    result = {key: dict(value) if isinstance(value, Mapping) else value for key, value in config.items()}
    for dotted_key, (env_key, expected_type) in ENV_OVERRIDES.items():
        if env_key not in env:
            continue
        raw_value = env[env_key]
        try:
            value = _coerce_env_value(raw_value, expected_type)
        except ValueError as exc:
            raise ConfigurationError(
                f"Environment override {env_key} has invalid value '{raw_value}': {exc}"
            ) from exc
        section, key = dotted_key.split(".")
        result.setdefault(section, {})[key] = value
    return result


def _coerce_env_value(raw: str, expected_type: type) -> Any:
    cleaned = raw.strip()
    if expected_type is bool:
        lowered = cleaned.lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        raise ValueError("expected boolean (true/false)")
    if expected_type is int:
        return int(cleaned)
    return cleaned


def _keywords(values: Any, default: tuple[str, ...]) -> tuple[str, ...]:
    if values is None:
        return default
    return tuple(str(value).lower() for value in values)


def _build_config(data: Mapping[str, Any], source_path: Optional[Path]) -> LedgerConfig:
    try:
        parsing_cfg = data.get("parsing") or {}
        default_year = parsing_cfg.get("default_year")
        parsing = ParsingSettings(
            default_year=int(default_year) if default_year is not None else None,
            day_first=bool(parsing_cfg.get("day_first", True)),
        )

        defaults = ClassificationRules()
        class_cfg = data.get("classification") or {}
        classification = ClassificationRules(
            fee_keywords=_keywords(class_cfg.get("fee_keywords"), defaults.fee_keywords),
            debit_keywords=_keywords(class_cfg.get("debit_keywords"), defaults.debit_keywords),
            credit_keywords=_keywords(class_cfg.get("credit_keywords"), defaults.credit_keywords),
        )

        base = SignConvention()
        accounts_cfg = data.get("account_types") or {}
        prefixes = dict(base.prefixes)
        for prefix, type_name in (accounts_cfg.get("prefixes") or {}).items():
            prefixes[str(prefix)] = AccountType(str(type_name).upper())
        normal_balances = dict(base.normal_balances)
        for type_name, side in (accounts_cfg.get("normal_balances") or {}).items():
            side = str(side).upper()
            if side not in (DEBIT_NORMAL, CREDIT_NORMAL):
                raise ValueError(f"normal balance must be D or C, got '{side}'")
            normal_balances[AccountType(str(type_name).upper())] = side
        sign_convention = SignConvention(prefixes=prefixes, normal_balances=normal_balances)
    except (AttributeError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid configuration structure: {exc}") from exc

    return LedgerConfig(
        source_path=source_path,
        parsing=parsing,
        classification=classification,
        sign_convention=sign_convention,
    )
