"""JSON file persistence for import profiles."""
import logging
from pathlib import Path

from app.core.config import settings
from app.core.errors import ProfileValidationError
from app.rules.profile_validation import validate_settings
from app.schemas.profile import ProfileSettings

logger = logging.getLogger(__name__)


class SettingsStore:
    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or settings.SETTINGS_PATH)

    def load(self) -> ProfileSettings:
        """Return the saved profiles, or a single Default profile if nothing is saved yet."""
        if not self.path.exists():
            return ProfileSettings.default()
        text = self.path.read_text(encoding="utf-8")
        if not text.strip():
            return ProfileSettings.default()
        return ProfileSettings.model_validate_json(text)

    def save(self, profile_settings: ProfileSettings) -> None:
        violations = validate_settings(profile_settings)
        if violations:
            raise ProfileValidationError(violations)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(profile_settings.to_json(), encoding="utf-8")
        logger.info("Saved %d profile(s) to %s", len(profile_settings.profiles), self.path)


def get_settings_store() -> SettingsStore:
    return SettingsStore()
