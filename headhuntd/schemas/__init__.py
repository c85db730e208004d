# __init__.py
from headhuntd.schemas.auth import LoginRequest, SignupRequest
from headhuntd.schemas.job import CompletionProjection, DraftProjection, PublicJob, PublishResult
from headhuntd.schemas.profile import OnboardingStepResult, ProfileProjection
from headhuntd.schemas.subscription import CheckoutSession, SubscriptionRead, VerificationResult
from headhuntd.schemas.user import AuthResponse, Token, UserRead, UserUpdate

__all__ = [
	"LoginRequest",
	"SignupRequest",
	"CompletionProjection",
	"DraftProjection",
	"PublicJob",
	"PublishResult",
	"OnboardingStepResult",
	"ProfileProjection",
	"CheckoutSession",
	"SubscriptionRead",
	"VerificationResult",
	"AuthResponse",
	"Token",
	"UserRead",
	"UserUpdate",
]
