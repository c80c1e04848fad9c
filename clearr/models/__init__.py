from clearr.models.user import User
from clearr.models.mode import Mode, ModePrompt
from clearr.models.translation import Translation

__all__ = ["User", "Mode", "ModePrompt", "Translation"]
