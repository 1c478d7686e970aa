from models.application import SocialSupportApplication

__all__ = [
    "SocialSupportApplication",
]
