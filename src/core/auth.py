from django.contrib.auth.models import AnonymousUser
from ninja_jwt.authentication import JWTAuth


class OptionalJWTAuth(JWTAuth):
    """
    Bearer auth for public read endpoints.

    Requests without an Authorization header go through as AnonymousUser so that
    selectors can apply the public visibility rules. A header that is present
    but invalid is still rejected with 401.
    """

    def __call__(self, request):
        if not request.headers.get(self.header):
            request.user = AnonymousUser()
            return request.user
        return super().__call__(request)
