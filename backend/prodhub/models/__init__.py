from prodhub.models.feedback import Feedback
from prodhub.models.profile import Profile, UserNotificationSettings

__all__ = ["Feedback", "Profile", "UserNotificationSettings"]
