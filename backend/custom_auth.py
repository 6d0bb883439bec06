from typing import Optional, TypeVar

from django.contrib.auth.models import AbstractBaseUser
from rest_framework import HTTP_HEADER_ENCODING
from rest_framework.request import Request

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.models import TokenUser
from rest_framework_simplejwt.tokens import Token

ACCESS_TOKEN_COOKIE = "access_token"

AuthUser = TypeVar("AuthUser", AbstractBaseUser, TokenUser)


class CookieJWTAuthentication(JWTAuthentication):
    """
    JWT authentication reading the access token from the ``access_token``
    cookie set by the frontend. Requests without the cookie fall back to the
    regular ``Authorization: Bearer`` header.
    """

    www_authenticate_realm = "api"
    media_type = "application/json"

    def authenticate(self, request: Request) -> Optional[tuple[AuthUser, Token]]:
        cookie = request.COOKIES.get(ACCESS_TOKEN_COOKIE) or None
        if cookie is None:
            return super().authenticate(request)

        raw_token = cookie.encode(HTTP_HEADER_ENCODING)
        validated_token = self.get_validated_token(raw_token)

        return self.get_user(validated_token), validated_token
