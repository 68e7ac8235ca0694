"""Run configuration for the event pipeline."""
import os
from dataclasses import dataclass
from typing import Mapping, Optional


@dataclass
class PipelineConfig:
    """Settings for a single pipeline run."""
    listing_html: str = 'SXSW · Events Calendar.html'
    overview_file: str = 'event_overviews.json'
    contents_file: str = 'event_contents.json'
    details_file: str = 'event_details.json'
    openai_api_key: Optional[str] = None
    model: str = 'gpt-3.5-turbo'
    max_tokens: int = 4096
    pacing_seconds: float = 1.0
    timeout_seconds: int = 30
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'PipelineConfig':
        """
        Build a configuration from environment variables.

        Args:
            env: Mapping to read from (default: os.environ)

        Returns:
            PipelineConfig with defaults for unset variables
        """
        env = os.environ if env is None else env
        defaults = cls()
        return cls(
            listing_html=env.get('LISTING_HTML', defaults.listing_html),
            overview_file=env.get('OVERVIEW_FILE', defaults.overview_file),
            contents_file=env.get('CONTENTS_FILE', defaults.contents_file),
            details_file=env.get('DETAILS_FILE', defaults.details_file),
            openai_api_key=env.get('OPENAI_API_KEY'),
            model=env.get('OPENAI_MODEL', defaults.model),
            max_tokens=int(env.get('MAX_TOKENS', defaults.max_tokens)),
            pacing_seconds=float(env.get('PACING_SECONDS', defaults.pacing_seconds)),
            timeout_seconds=int(env.get('TIMEOUT_SECONDS', defaults.timeout_seconds)),
            log_level=env.get('LOG_LEVEL', defaults.log_level)
        )
