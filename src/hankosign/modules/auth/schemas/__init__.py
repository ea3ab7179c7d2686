from .auth_schemas import (
    LoginRequest, TokenResponse, RegisterRequest, RegisterResponse,
    RegisteredUser, ForgotPasswordRequest, ResetPasswordRequest,
    MessageResponse, check_password_policy
)

__all__ = [
    'LoginRequest', 'TokenResponse', 'RegisterRequest', 'RegisterResponse',
    'RegisteredUser', 'ForgotPasswordRequest', 'ResetPasswordRequest',
    'MessageResponse', 'check_password_policy'
]
