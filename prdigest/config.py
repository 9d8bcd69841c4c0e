"""Configuration loading from a JSON/YAML file and environment.

The digest settings (org, repos, users, caps) live at the top level of the
config file. Optional ``github:`` and ``logging:`` sections tune the API
client and log output. Secrets (tokens) are taken from environment
variables or from files (Docker secrets); never put real tokens in config
files committed to the repo.
"""

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_ENV = "PR_DIGEST_CONFIG"


class ConfigError(Exception):
    """Raised when the digest configuration is missing or invalid."""

    pass


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = os.environ.get(env_key)
    if value:
        return value.strip()
    file_path = os.environ.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


class DigestConfig(BaseModel):
    """What to collect and how much of it to render."""

    org: str = Field(min_length=1, description="Organization used to scope author searches")
    repos: list[str] = Field(default_factory=list, description="Team-owned repositories (owner/repo)")
    users: list[str] = Field(default_factory=list, description="Team members whose PRs are searched")
    max_prs_per_repo: int = Field(default=25, ge=0, description="Max PRs rendered per repository")
    max_total_prs: int = Field(default=200, ge=0, description="Max PRs collected in one run")
    max_search_results_per_user: int = Field(
        default=500, ge=0, description="Max search results considered per user"
    )

    @field_validator("org", mode="before")
    @classmethod
    def _strip_org(cls, value: Any) -> Any:
        return value if value is None else str(value).strip()

    @field_validator("max_prs_per_repo", "max_total_prs", "max_search_results_per_user", mode="before")
    @classmethod
    def _null_cap_is_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("repos", "users", mode="before")
    @classmethod
    def _list_or_empty(cls, value: Any) -> list[str]:
        # Anything that is not a list counts as "not configured"
        if not isinstance(value, list):
            return []
        return ["" if v is None else str(v) for v in value]

    @property
    def team_repos(self) -> set[str]:
        """Repo names as used for ownership checks."""
        return {r.strip() for r in self.repos}


class GitHubConfig(BaseSettings):
    """GitHub API settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    token: str | None = Field(default=None, description="PAT or app token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    timeout: int = Field(default=30, ge=1, description="Per-request timeout in seconds")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseModel):
    """Root application config."""

    digest: DigestConfig
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if t and not t.startswith("${"):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")


def resolve_config_path(cli_value: Path | None = None) -> Path:
    """Return the config path from the CLI, falling back to PR_DIGEST_CONFIG."""
    if cli_value is not None:
        return cli_value
    env_value = os.environ.get(CONFIG_ENV, "").strip()
    if not env_value:
        raise ConfigError(f"Missing {CONFIG_ENV} environment variable.")
    return Path(env_value)


def _format_validation_error(path: Path, exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or "config"
        parts.append(f'"{field}": {err.get("msg", "invalid value")}')
    return f"{path} has invalid settings: " + "; ".join(parts)


def _parse_document(path: Path, text: str) -> Any:
    """Parse .json files as JSON, anything else as YAML."""
    if path.suffix.lower() == ".json":
        try:
            return json.loads(text)
        except ValueError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e


def _section(path: Path, raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f'{path}: "{key}" must be an object')
    return {str(k): v for k, v in value.items()}


def load_config(config_path: Path) -> AppConfig:
    """Load and validate the digest config.

    Raises:
        ConfigError: if the file is missing, unreadable or not valid
            JSON/YAML, if "org" is missing, or if neither repos nor
            users are configured.
    """
    path = Path(config_path)
    if not path.is_file():
        raise ConfigError(f"PR digest config file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    raw = _parse_document(path, text)
    if not isinstance(raw, dict):
        raise ConfigError(f"Invalid config in {path}: expected an object at the top level")

    if not raw.get("org"):
        raise ConfigError(f'{path} must include "org"')

    digest_raw = {k: v for k, v in raw.items() if k not in ("github", "logging")}
    try:
        digest = DigestConfig.model_validate(digest_raw)
        github = GitHubConfig(**_section(path, raw, "github"))
        logging = LoggingConfig(**_section(path, raw, "logging"))
    except ValidationError as e:
        raise ConfigError(_format_validation_error(path, e)) from e

    if not digest.repos and not digest.users:
        raise ConfigError(f"{path} must include at least one repo or one user")

    return AppConfig(digest=digest, github=github, logging=logging)
