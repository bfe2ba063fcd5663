# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .authenticate_user import AuthenticateUserUseCase
from .change_password import ChangePasswordUseCase
from .delete_account import DeleteAccountUseCase
from .email_change import RequestEmailChangeUseCase, VerifyEmailChangeUseCase
from .get_profile import GetProfileUseCase
from .password_reset import ResetPasswordUseCase, SendPasswordResetEmailUseCase
from .profile_picture import ChangeProfilePictureUseCase, relink_author_articles
from .refresh_session import RefreshSessionUseCase
from .register_user import RegisterUserUseCase
from .verify_email import ResendVerificationEmailUseCase, VerifyEmailUseCase

__all__ = [
    "AuthenticateUserUseCase",
    "ChangePasswordUseCase",
    "ChangeProfilePictureUseCase",
    "DeleteAccountUseCase",
    "GetProfileUseCase",
    "RefreshSessionUseCase",
    "RegisterUserUseCase",
    "RequestEmailChangeUseCase",
    "ResendVerificationEmailUseCase",
    "ResetPasswordUseCase",
    "SendPasswordResetEmailUseCase",
    "VerifyEmailChangeUseCase",
    "VerifyEmailUseCase",
    "relink_author_articles",
]
