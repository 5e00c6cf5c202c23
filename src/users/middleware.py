import logging
from datetime import datetime, timezone

from django.conf import settings
from django.utils.timezone import now
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken, RefreshToken

logger = logging.getLogger(__name__)

ACCESS_COOKIE = 'access_token'
REFRESH_COOKIE = 'refresh_token'


def set_token_cookie(response, key, token):
    """Write one simplejwt token as an httpOnly cookie expiring with the token."""
    response.set_cookie(
        key=key,
        value=str(token),
        httponly=True,
        secure=getattr(settings, 'AUTH_COOKIE_SECURE', not settings.DEBUG),
        samesite=getattr(settings, 'AUTH_COOKIE_SAMESITE', 'Lax'),
        expires=datetime.fromtimestamp(token['exp'], tz=timezone.utc),
        path='/',
    )


def token_lifetime_left(token):
    """Seconds until `exp` of a simplejwt token (negative when expired)."""
    return int(token['exp'] - now().timestamp())


class JWTAuthCookieMiddleware:
    """
    Booking clients authenticate with the cookies set at login/register.

    A valid access cookie becomes a Bearer header. When it has expired but
    the refresh cookie is still good, a new access token is minted for this
    request and written back on the response. An explicit Authorization
    header from the client is left untouched.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.META.get('HTTP_AUTHORIZATION'):
            return self.get_response(request)

        access = self._valid_access(request.COOKIES.get(ACCESS_COOKIE))
        if access is not None:
            request.META['HTTP_AUTHORIZATION'] = f'Bearer {access}'
            return self.get_response(request)

        refreshed = self._refreshed_access(request.COOKIES.get(REFRESH_COOKIE))
        if refreshed is None:
            return self.get_response(request)

        request.META['HTTP_AUTHORIZATION'] = f'Bearer {refreshed}'
        response = self.get_response(request)
        set_token_cookie(response, ACCESS_COOKIE, refreshed)
        return response

    @staticmethod
    def _valid_access(raw):
        if not raw:
            return None
        try:
            return AccessToken(raw)
        except TokenError:
            return None

    @staticmethod
    def _refreshed_access(raw):
        if not raw:
            return None
        try:
            access = RefreshToken(raw).access_token
        except TokenError:
            logger.debug("Refresh cookie rejected")
            return None
        logger.debug("Access cookie renewed for user %s", access.get('user_id'))
        return access
