"""
Configuration settings for the Gantt scheduling engine.
Load configuration from environment variables or a project .env file.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_file = Path(__file__).parent.parent.parent / '.env'
if env_file.exists():
    load_dotenv(env_file)


CONFLICT_POLICIES = ('reject', 'last_write_wins')


def _split_keywords(value: str) -> tuple[str, ...]:
    return tuple(k.strip().lower() for k in value.split(',') if k.strip())


class Settings:
    """Application settings loaded from environment variables."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent.parent
    LOG_DIR = Path(os.getenv('GANTT_LOG_DIR', str(PROJECT_ROOT / 'logs')))

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_TO_FILE = os.getenv('GANTT_LOG_TO_FILE', 'false').strip().lower() in ('1', 'true', 'yes', 'on')

    # ============================================================================
    # Normalization
    # ============================================================================
    DEFAULT_DURATION_DAYS = int(os.getenv('GANTT_DEFAULT_DURATION_DAYS', '7'))
    MILESTONE_KEYWORDS = _split_keywords(
        os.getenv('GANTT_MILESTONE_KEYWORDS', 'milestone,inspection,delivery')
    )

    # ============================================================================
    # Timeline layout
    # ============================================================================
    TIMELINE_PADDING_DAYS = int(os.getenv('GANTT_TIMELINE_PADDING_DAYS', '7'))

    # ============================================================================
    # Drag-reflow
    # ============================================================================
    RESCHEDULE_CONFLICT_POLICY = os.getenv('GANTT_RESCHEDULE_CONFLICT_POLICY', 'reject')

    @classmethod
    def validate_required_settings(cls) -> list[str]:
        """
        Validate that settings hold usable values.
        Returns list of problems found (empty if valid).
        """
        problems = []

        if cls.DEFAULT_DURATION_DAYS < 0:
            problems.append('GANTT_DEFAULT_DURATION_DAYS must not be negative')
        if cls.TIMELINE_PADDING_DAYS < 1:
            # Padding keeps the timeline window wider than zero days
            problems.append('GANTT_TIMELINE_PADDING_DAYS must be at least 1')
        if cls.RESCHEDULE_CONFLICT_POLICY not in CONFLICT_POLICIES:
            problems.append(
                f'GANTT_RESCHEDULE_CONFLICT_POLICY must be one of {CONFLICT_POLICIES}, '
                f'got {cls.RESCHEDULE_CONFLICT_POLICY!r}'
            )

        return problems

    @classmethod
    def validate(cls) -> None:
        """Raise ValueError if any setting is unusable."""
        problems = cls.validate_required_settings()
        if problems:
            raise ValueError('Invalid settings: ' + '; '.join(problems))


# Create settings instance
settings = Settings()
