# __init__.py
from headhuntd.models.job import Job
from headhuntd.models.saved_job import SavedJob
from headhuntd.models.subscription import Subscription
from headhuntd.models.user import User

__all__ = [
	"Job",
	"SavedJob",
	"Subscription",
	"User",
]
